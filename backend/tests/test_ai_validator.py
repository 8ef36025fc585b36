import pytest

from services.ai_validator import (
    AIResponseValidator,
    detect_hallucination,
    get_confidence_tier,
)

JD_TEXT = "We need Python and Django developers with PostgreSQL experience."

GOOD_RESPONSE = {
    "requiredSkills": ["Python", "Django"],
    "preferredSkills": ["PostgreSQL"],
    "requiredExperience": 5,
    "educationRequirement": "Bachelor's",
    "keywords": ["backend"],
}


class TestValidator:
    def setup_method(self):
        self.validator = AIResponseValidator()

    def test_clean_response(self):
        report = self.validator.validate(GOOD_RESPONSE, JD_TEXT)
        assert report.is_valid
        assert report.confidence == 1.0
        assert report.tier == "EXCELLENT"
        assert report.issues == []
        assert not report.should_use_fallback

    def test_string_skills_trigger_fallback(self):
        response = {
            "requiredSkills": "Python, Django",
            "preferredSkills": [],
            "requiredExperience": 5,
            "educationRequirement": None,
            "keywords": [],
        }
        report = self.validator.validate(response, JD_TEXT)
        assert "requiredSkills is not an array" in report.issues
        assert report.confidence == pytest.approx(0.4)
        assert report.confidence <= 0.7
        assert report.should_use_fallback
        assert report.tier == "POOR"

    def test_empty_object(self):
        report = self.validator.validate({}, JD_TEXT)
        assert report.confidence == 0.0
        assert report.tier == "UNRELIABLE"
        assert "Missing field: requiredSkills" in report.issues

    def test_non_object(self):
        report = self.validator.validate(["Python"], JD_TEXT)
        assert report.confidence == 0.0
        assert report.should_use_fallback

    def test_hallucinated_skills(self):
        response = {
            **GOOD_RESPONSE,
            "requiredSkills": ["Python", "Rust", "Haskell", "Erlang"],
            "preferredSkills": [],
            "keywords": ["x"],
        }
        report = self.validator.validate(response, JD_TEXT)
        assert any(i.startswith("Possible hallucinated skills") for i in report.issues)
        assert report.confidence == pytest.approx(0.7)
        assert report.tier == "GOOD"

    def test_unrealistic_experience(self):
        report = self.validator.validate({**GOOD_RESPONSE, "requiredExperience": 45}, JD_TEXT)
        assert report.confidence == pytest.approx(0.7)

    def test_boolean_is_not_a_number(self):
        report = self.validator.validate({**GOOD_RESPONSE, "requiredExperience": True}, JD_TEXT)
        assert "requiredExperience is not a number" in report.issues


class TestHallucination:
    def test_tolerates_minority_paraphrase(self):
        assert detect_hallucination(["Python", "Django", "PostgreSQL", "OOP"], JD_TEXT) == []

    def test_flags_all_missing_past_threshold(self):
        assert detect_hallucination(["Python", "Rust", "Haskell"], JD_TEXT) == ["Rust", "Haskell"]


@pytest.mark.parametrize(
    "confidence, tier",
    [
        (0.95, "EXCELLENT"),
        (0.9, "EXCELLENT"),
        (0.89, "GOOD"),
        (0.7, "GOOD"),
        (0.5, "ACCEPTABLE"),
        (0.3, "POOR"),
        (0.29, "UNRELIABLE"),
    ],
)
def test_confidence_tiers(confidence, tier):
    assert get_confidence_tier(confidence) == tier
