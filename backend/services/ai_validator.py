"""Schema and hallucination checks for AI-extracted job requirements."""

from collections.abc import Mapping
from typing import Any

from models.schemas.job_requirements import ConfidenceTier
from models.schemas.validation import ValidationReport

REQUIRED_FIELDS = (
    "requiredSkills",
    "preferredSkills",
    "requiredExperience",
    "educationRequirement",
    "keywords",
)

VALID_THRESHOLD = 0.5
HALLUCINATION_RATIO = 0.3
MIN_TOTAL_ITEMS = 3
MAX_EXPERIENCE_YEARS = 30


def get_confidence_tier(confidence: float) -> ConfidenceTier:
    if confidence >= 0.9:
        return "EXCELLENT"
    if confidence >= 0.7:
        return "GOOD"
    if confidence >= 0.5:
        return "ACCEPTABLE"
    if confidence >= 0.3:
        return "POOR"
    return "UNRELIABLE"


def detect_hallucination(skills: list[Any], original_text: str) -> list[str]:
    """Skills missing from the source text, reported only past the 30% mark.

    A few paraphrased skills are tolerated; a response where more than 30% of
    the skills never appear in the text is flagged in full.
    """
    lower_text = (original_text or "").lower()
    missing = [str(s) for s in skills if str(s).lower() not in lower_text]
    if len(missing) > len(skills) * HALLUCINATION_RATIO:
        return missing
    return []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class AIResponseValidator:
    """Scores an AI response from 1.0 down, one deduction per problem found."""

    def validate(self, response: Any, original_text: str) -> ValidationReport:
        if not isinstance(response, Mapping):
            issues = ["Response is not a JSON object"]
            return ValidationReport(
                is_valid=False,
                confidence=0.0,
                tier="UNRELIABLE",
                issues=issues,
                should_use_fallback=True,
            )

        issues: list[str] = []
        confidence = 1.0

        for field in REQUIRED_FIELDS:
            if field not in response:
                issues.append(f"Missing field: {field}")
                confidence -= 0.2

        required = response.get("requiredSkills")
        if not isinstance(required, list):
            issues.append("requiredSkills is not an array")
            confidence -= 0.3
        elif not required:
            issues.append("requiredSkills is empty (suspicious)")
            confidence -= 0.2

        preferred = response.get("preferredSkills")
        if not isinstance(preferred, list):
            issues.append("preferredSkills is not an array")
            confidence -= 0.2

        experience = response.get("requiredExperience")
        if not _is_number(experience):
            issues.append("requiredExperience is not a number")
            confidence -= 0.2
        elif experience < 0 or experience > MAX_EXPERIENCE_YEARS:
            issues.append(f"Unrealistic experience requirement: {experience}")
            confidence -= 0.3

        keywords = response.get("keywords")
        if not isinstance(keywords, list):
            issues.append("keywords is not an array")
            confidence -= 0.1
        elif not keywords:
            issues.append("keywords array is empty")
            confidence -= 0.1

        if isinstance(required, list) and required:
            flagged = detect_hallucination(required, original_text)
            if flagged:
                issues.append(f"Possible hallucinated skills: {', '.join(flagged)}")
                confidence -= 0.1 * len(flagged)

        total_items = sum(
            len(value) for value in (required, preferred, keywords) if isinstance(value, list)
        )
        if total_items < MIN_TOTAL_ITEMS:
            issues.append("Response seems incomplete (very few items extracted)")
            confidence -= 0.2

        # Rounded so chained 0.1/0.2 deductions do not land just under a tier edge.
        confidence = max(0.0, round(confidence, 6))
        return ValidationReport(
            is_valid=confidence >= VALID_THRESHOLD,
            confidence=confidence,
            tier=get_confidence_tier(confidence),
            issues=issues,
            should_use_fallback=confidence < VALID_THRESHOLD,
        )
