"""Client for the external AI résumé-parsing service."""

from typing import Any, Dict, Optional

import requests
from requests.utils import quote

from .logger import get_logger
from .retry import (
    CircuitBreaker,
    CircuitOpenError,
    RetryError,
    RetryPolicy,
    is_retryable_status,
    with_retries,
)

logger = get_logger()

TRANSIENT_ERRORS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
)


class AIServiceError(Exception):
    """Raised when the parsing service cannot satisfy a request."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class _RetryableStatus(Exception):
    def __init__(self, response: requests.Response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


class ResumeParserClient:
    """
    Thin wrapper around the parsing service's HTTP API.

    Transient failures (timeouts, connection errors, 5xx/408/429) are
    retried under the client's RetryPolicy. Repeated failures open a
    circuit breaker so a dead service is not called for every résumé.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_policy: Optional[RetryPolicy] = None,
        http: Optional[requests.Session] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.http = http or requests.Session()
        self.breaker = breaker or CircuitBreaker(
            name="ai-service",
            failure_threshold=5,
            recovery_timeout=60,
            expected_exception=AIServiceError,
        )

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ResumeParserClient":
        kwargs.setdefault("retry_policy", RetryPolicy(max_retries=settings.ai_service_max_retries))
        return cls(settings.ai_service_url, timeout=settings.ai_service_timeout, **kwargs)

    def fetch_parsed_resume(self, username: str) -> Dict[str, Any]:
        """
        Fetch the parsed output the service holds for a username.

        Returns:
            The ``parsed_output`` document, or an empty dict if the service
            has not produced one

        Raises:
            AIServiceError: On HTTP errors, exhausted retries or an open circuit
        """
        data = self._get_json(f"/api/v1/resume/{quote(str(username), safe='')}")
        parsed = data.get("parsed_output") if isinstance(data, dict) else None
        return parsed if isinstance(parsed, dict) else {}

    def health(self) -> Dict[str, Any]:
        data = self._get_json("/health")
        return data if isinstance(data, dict) else {"status": data}

    def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.breaker.call(self._request, "GET", url)
        except CircuitOpenError as e:
            logger.warning("AI service circuit open, call skipped", url=url)
            raise AIServiceError(str(e)) from e

        if response.status_code == 404:
            logger.warning("AI service resource not found", url=url, status=404)
            raise AIServiceError(f"Not found (404): {url}", status=404)

        try:
            return response.json()
        except ValueError as e:
            logger.record_service_failure("InvalidJSON")
            logger.error("AI service returned invalid JSON", url=url)
            raise AIServiceError(f"Invalid JSON from AI service: {url}") from e

    def _request(self, method: str, url: str) -> requests.Response:
        """One logical call, retried on transient failures."""
        logger.record_service_call()

        @with_retries(
            self.retry_policy,
            exceptions=TRANSIENT_ERRORS + (_RetryableStatus,),
            on_retry=lambda attempt, exc, delay: logger.warning(
                "AI service call failed, retrying",
                url=url, attempt=attempt, error=str(exc), delay=delay,
            ),
        )
        def send() -> requests.Response:
            resp = self.http.request(method, url, timeout=self.timeout)
            if is_retryable_status(resp.status_code):
                raise _RetryableStatus(resp)
            return resp

        try:
            resp = send()
            if resp.status_code == 404:
                # reported by _get_json
                return resp
            resp.raise_for_status()
            return resp
        except RetryError as e:
            cause = e.__cause__
            status = cause.response.status_code if isinstance(cause, _RetryableStatus) else None
            logger.record_service_failure(type(cause).__name__ if cause else "RetryError")
            logger.error("AI service unavailable", url=url, status=status, attempts=e.attempts)
            raise AIServiceError(f"AI service unavailable: {url}", status=status) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.record_service_failure(f"HTTPError_{status}")
            logger.error("AI service request failed", url=url, status=status)
            raise AIServiceError(f"AI service request failed ({status}): {url}", status=status) from e
        except requests.exceptions.RequestException as e:
            logger.record_service_failure("RequestException")
            logger.error("AI service request error", url=url, error=str(e))
            raise AIServiceError(f"AI service request error: {e}") from e
