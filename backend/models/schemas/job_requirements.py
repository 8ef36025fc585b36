"""Structured requirements extracted from a job description."""

from typing import Literal

from pydantic import BaseModel

EducationLevel = Literal["PhD", "Master's", "Bachelor's", "Associate's", "Diploma"]
ConfidenceTier = Literal["EXCELLENT", "GOOD", "ACCEPTABLE", "POOR", "UNRELIABLE"]


class Provenance(BaseModel):
    """Which extractor produced a requirement set and how far the AI can be trusted."""
    used_ai: bool = False
    used_fallback: bool = False
    confidence_tier: ConfidenceTier | None = None  # None when no AI call was made
    ai_confidence: float | None = None  # validator confidence, 0.0-1.0
    issues: list[str] = []


class JobRequirements(BaseModel):
    """Output of the requirement extraction coordinator.

    Created once per analysis and never persisted. All list fields default to
    empty so that a total extraction failure still yields a valid (zeroed) object.
    """
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    required_experience_years: int = 0
    education_requirement: EducationLevel | None = None
    keywords: list[str] = []
    responsibilities: list[str] = []
    provenance: Provenance = Provenance()
