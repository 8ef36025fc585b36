"""Pydantic contracts passed between the extraction, scoring and confidence stages."""

from models.schemas.confidence import ConfidenceAssessment, ConfidenceFactor, DisplayRange
from models.schemas.explanation import (
    CategoryJustification,
    Explanation,
    Gap,
    Recommendation,
    Strength,
)
from models.schemas.job_requirements import JobRequirements, Provenance
from models.schemas.match_result import CategoryScoreResult, MatchResult
from models.schemas.resume_profile import (
    ContactInfo,
    EducationEntry,
    ExperienceEntry,
    ResumeProfile,
)
from models.schemas.skill_match import SkillMatch
from models.schemas.validation import ReliableCallResult, ValidationReport

__all__ = [
    "CategoryJustification",
    "CategoryScoreResult",
    "ConfidenceAssessment",
    "ConfidenceFactor",
    "ContactInfo",
    "DisplayRange",
    "EducationEntry",
    "ExperienceEntry",
    "Explanation",
    "Gap",
    "JobRequirements",
    "MatchResult",
    "Provenance",
    "Recommendation",
    "ReliableCallResult",
    "ResumeProfile",
    "SkillMatch",
    "Strength",
    "ValidationReport",
]
