"""
Tests for the AI parsing-service client, with the HTTP session mocked.
"""

import pytest
import requests
from unittest.mock import Mock

from talentmatch.ai_client import AIServiceError, ResumeParserClient
from talentmatch.config import Settings
from talentmatch.retry import CircuitBreaker, RetryPolicy


def make_response(status_code=200, payload=None):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload if payload is not None else {}
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    return resp


@pytest.fixture
def http():
    return Mock()


@pytest.fixture
def client(http):
    return ResumeParserClient(
        "http://parser.local/",
        timeout=5.0,
        retry_policy=RetryPolicy(max_retries=2, base_delay=0),
        http=http,
    )


class TestFetchParsedResume:

    def test_returns_parsed_output(self, client, http, strong_resume_doc):
        http.request.return_value = make_response(200, {"parsed_output": strong_resume_doc})

        assert client.fetch_parsed_resume("alice") == strong_resume_doc
        http.request.assert_called_once_with(
            "GET", "http://parser.local/api/v1/resume/alice", timeout=5.0
        )

    @pytest.mark.parametrize("username, path", [
        ("a#b", "/api/v1/resume/a%23b"),
        ("a?b=1", "/api/v1/resume/a%3Fb%3D1"),
        ("../admin", "/api/v1/resume/..%2Fadmin"),
        ("jane doe", "/api/v1/resume/jane%20doe"),
    ])
    def test_username_is_escaped_as_one_path_segment(self, client, http, username, path):
        http.request.return_value = make_response(200, {"parsed_output": {}})

        client.fetch_parsed_resume(username)

        http.request.assert_called_once_with("GET", f"http://parser.local{path}", timeout=5.0)

    @pytest.mark.parametrize("payload", [{}, {"parsed_output": None}, {"parsed_output": "text"}, ["x"]])
    def test_missing_parsed_output_is_empty(self, client, http, payload):
        http.request.return_value = make_response(200, payload)
        assert client.fetch_parsed_resume("alice") == {}

    def test_not_found(self, client, http):
        http.request.return_value = make_response(404)

        with pytest.raises(AIServiceError) as exc_info:
            client.fetch_parsed_resume("ghost")

        assert exc_info.value.status == 404
        assert http.request.call_count == 1

    def test_not_found_does_not_trip_breaker(self, http):
        breaker = CircuitBreaker(failure_threshold=1, expected_exception=AIServiceError)
        client = ResumeParserClient("http://parser.local", http=http, breaker=breaker)
        http.request.return_value = make_response(404)

        with pytest.raises(AIServiceError):
            client.fetch_parsed_resume("ghost")

        assert breaker.state == CircuitBreaker.CLOSED

    def test_retries_server_errors(self, client, http):
        http.request.side_effect = [
            make_response(503),
            make_response(200, {"parsed_output": {"job_titles": ["Engineer"]}}),
        ]

        assert client.fetch_parsed_resume("alice") == {"job_titles": ["Engineer"]}
        assert http.request.call_count == 2

    def test_retries_timeouts(self, client, http):
        http.request.side_effect = [
            requests.exceptions.Timeout("slow"),
            make_response(200, {"parsed_output": {"job_titles": ["Engineer"]}}),
        ]

        assert client.fetch_parsed_resume("alice") == {"job_titles": ["Engineer"]}

    def test_exhausted_retries(self, client, http):
        http.request.return_value = make_response(502)

        with pytest.raises(AIServiceError) as exc_info:
            client.fetch_parsed_resume("alice")

        assert exc_info.value.status == 502
        assert http.request.call_count == 3

    def test_connection_errors_exhausted(self, client, http):
        http.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(AIServiceError) as exc_info:
            client.fetch_parsed_resume("alice")

        assert exc_info.value.status is None
        assert http.request.call_count == 3

    def test_client_error_is_not_retried(self, client, http):
        http.request.return_value = make_response(400)

        with pytest.raises(AIServiceError) as exc_info:
            client.fetch_parsed_resume("alice")

        assert exc_info.value.status == 400
        assert http.request.call_count == 1

    def test_other_request_errors(self, client, http):
        http.request.side_effect = requests.exceptions.InvalidURL("bad url")

        with pytest.raises(AIServiceError, match="request error"):
            client.fetch_parsed_resume("alice")

        assert http.request.call_count == 1

    def test_invalid_json(self, client, http):
        resp = make_response(200)
        resp.json.side_effect = ValueError("Expecting value")
        http.request.return_value = resp

        with pytest.raises(AIServiceError, match="Invalid JSON"):
            client.fetch_parsed_resume("alice")


class TestCircuitBreaking:

    def test_open_circuit_skips_calls(self, http):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=60, expected_exception=AIServiceError)
        client = ResumeParserClient(
            "http://parser.local",
            retry_policy=RetryPolicy(max_retries=0),
            http=http,
            breaker=breaker,
        )
        http.request.return_value = make_response(500)

        with pytest.raises(AIServiceError):
            client.fetch_parsed_resume("alice")
        assert breaker.state == CircuitBreaker.OPEN

        with pytest.raises(AIServiceError, match="Circuit breaker is OPEN"):
            client.fetch_parsed_resume("bob")

        assert http.request.call_count == 1


class TestHealth:

    def test_health(self, client, http):
        http.request.return_value = make_response(200, {"status": "ok"})

        assert client.health() == {"status": "ok"}
        http.request.assert_called_once_with("GET", "http://parser.local/health", timeout=5.0)


class TestFromSettings:

    def test_uses_configured_url_timeout_and_retries(self, http):
        settings = Settings(ai_service_url="http://ai:9000", ai_service_timeout=12.5, ai_service_max_retries=1)

        client = ResumeParserClient.from_settings(settings, http=http)

        assert client.base_url == "http://ai:9000"
        assert client.timeout == 12.5
        assert client.retry_policy.max_retries == 1
