"""Structured resume data supplied by the resume-structure collaborator."""

from pydantic import BaseModel


class ContactInfo(BaseModel):
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    github: str | None = None


class ExperienceEntry(BaseModel):
    """A single dated role or position."""
    title: str = ""
    start_date: str = ""
    end_date: str = ""
    duration_months: int = 0
    description: str = ""


class EducationEntry(BaseModel):
    """A single degree line from the resume."""
    degree: str = ""  # raw text, e.g. "B.S. in Computer Science"
    level: str | None = None  # PhD, Master's, Bachelor's, Associate's, Diploma
    institution: str = ""


class ResumeProfile(BaseModel):
    """Read-only view of a parsed resume.

    parse_quality is an ordinal 0-5 describing how cleanly the text was
    recovered from the original file (5 = clean, 0 = unusable).
    """
    raw_text: str = ""
    contact: ContactInfo = ContactInfo()
    experience_entries: list[ExperienceEntry] = []
    education_entries: list[EducationEntry] = []
    skills: list[str] = []
    total_years_experience: float = 0.0
    parse_quality: int = 0
