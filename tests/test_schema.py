"""
Tests for schema validation.
"""

import pytest
from talentmatch.schema import validate_job, validate_job_strict, validate_parsed_output


@pytest.fixture
def valid_job():
    return {
        "title": "Backend Engineer",
        "business_id": "biz-1",
        "description": "Build services",
        "experience": "senior",
        "degree": "bachelor",
        "field": "backend",
    }


class TestValidateJob:
    """Test basic job validation."""

    def test_valid_job(self, valid_job):
        assert validate_job(valid_job) == []

    def test_minimal_job(self):
        assert validate_job({"title": "Engineer", "business_id": "biz-1"}) == []

    def test_missing_required_field(self):
        errors = validate_job({"title": "Engineer"})
        assert errors == ["Missing required field: business_id"]

    def test_blank_required_field(self):
        errors = validate_job({"title": "   ", "business_id": "biz-1"})
        assert any("title" in err for err in errors)

    def test_optional_fields_must_be_strings(self, valid_job):
        valid_job["technique"] = ["python", "sql"]
        errors = validate_job(valid_job)
        assert errors == ["Field 'technique' must be a string if provided"]

    def test_optional_none_is_allowed(self, valid_job):
        valid_job["field"] = None
        assert validate_job(valid_job) == []

    def test_title_too_short(self):
        errors = validate_job({"title": "AB", "business_id": "biz-1"})
        assert any("length" in err for err in errors)

    def test_title_too_long(self):
        errors = validate_job({"title": "x" * 201, "business_id": "biz-1"})
        assert any("length" in err for err in errors)

    def test_status(self, valid_job):
        valid_job["status"] = "Closed"
        assert validate_job(valid_job) == []

        valid_job["status"] = "archived"
        assert any("status" in err for err in validate_job(valid_job))


class TestValidateJobStrict:
    """Test strict validation of requirement levels."""

    def test_valid_job(self, valid_job):
        assert validate_job_strict(valid_job) == (True, [])

    @pytest.mark.parametrize("experience", ["none", "Mid-Level", "manager"])
    def test_known_experience_levels(self, valid_job, experience):
        valid_job["experience"] = experience
        is_valid, _ = validate_job_strict(valid_job)
        assert is_valid

    def test_unknown_experience_level(self, valid_job):
        valid_job["experience"] = "grandmaster"
        is_valid, errors = validate_job_strict(valid_job)
        assert not is_valid
        assert errors == ["Unknown experience level: grandmaster"]

    def test_unknown_degree_level(self, valid_job):
        valid_job["degree"] = "diploma"
        is_valid, errors = validate_job_strict(valid_job)
        assert not is_valid
        assert errors == ["Unknown degree level: diploma"]

    def test_includes_basic_errors(self):
        is_valid, errors = validate_job_strict({"title": "Engineer"})
        assert not is_valid
        assert "Missing required field: business_id" in errors


class TestValidateParsedOutput:
    """Test shape checks for parsing-service documents."""

    def test_well_formed(self, strong_resume_doc):
        assert validate_parsed_output(strong_resume_doc) == []

    def test_flat_technical_skills(self):
        assert validate_parsed_output({"technical_skills": ["python"]}) == []

    @pytest.mark.parametrize("doc", [None, [], "text"])
    def test_not_an_object(self, doc):
        assert validate_parsed_output(doc) == ["parsed_output must be an object"]

    def test_empty_document(self):
        assert validate_parsed_output({}) == ["parsed_output has no extracted fields"]

    def test_wrong_types(self):
        errors = validate_parsed_output({
            "skills": ["python"],
            "work_experience": "five years",
            "education": [{"degree": "BSc"}, "MSc"],
            "job_titles": ["Engineer"],
        })

        assert "Field 'skills' must be an object if provided" in errors
        assert "Field 'work_experience' must be a list if provided" in errors
        assert "Every entry in 'education' must be an object" in errors
        assert "parsed_output has no extracted fields" not in errors

    def test_technical_not_a_list(self):
        errors = validate_parsed_output({"skills": {"technical": "python"}, "job_titles": ["x"]})
        assert errors == ["Field 'skills.technical' must be a list if provided"]
