"""Five-level education vocabulary shared by extraction and scoring."""

import re

from models.schemas.job_requirements import EducationLevel

# Hierarchy rank; 0 means no recognized degree.
EDUCATION_RANK: dict[str, int] = {
    "Diploma": 1,
    "Associate's": 2,
    "Bachelor's": 3,
    "Master's": 4,
    "PhD": 5,
}

# Highest first. Full words match in any case; bare abbreviations (MS, BA, ME)
# only in capitals so ordinary words like "as" or "me" do not count.
DEGREE_RULES: tuple[tuple[EducationLevel, re.Pattern], ...] = (
    (
        "PhD",
        re.compile(r"(?i:\bph\.?\s?d\b|\bdoctorate\b|\bdoctoral\b)"),
    ),
    (
        "Master's",
        re.compile(
            r"(?i:\bmaster(?:['’]?s)?\b|\bmba\b|\bm\.?tech\b|\bm\.?sc\b)"
            r"|\b(?:M\.?S|M\.?A|M\.?E)\b"
        ),
    ),
    (
        "Bachelor's",
        re.compile(
            r"(?i:\bbachelor(?:['’]?s)?\b|\bundergraduate\b|\bb\.?tech\b|\bb\.?sc\b|\bb\.?eng\b)"
            r"|\b(?:B\.?S|B\.?A|B\.?E)\b"
        ),
    ),
    (
        "Associate's",
        re.compile(r"(?i:\bassociate['’]?s\b|\bassociate\s+degree\b)|\bA\.S\.|\bA\.A\."),
    ),
    (
        "Diploma",
        re.compile(r"(?i:\bdiploma\b|\bcertificate\b)"),
    ),
)

_ALIASES: dict[str, EducationLevel] = {
    "phd": "PhD",
    "ph.d": "PhD",
    "ph.d.": "PhD",
    "doctorate": "PhD",
    "masters": "Master's",
    "master": "Master's",
    "master's": "Master's",
    "ms": "Master's",
    "m.s.": "Master's",
    "msc": "Master's",
    "mba": "Master's",
    "bachelors": "Bachelor's",
    "bachelor": "Bachelor's",
    "bachelor's": "Bachelor's",
    "bs": "Bachelor's",
    "b.s.": "Bachelor's",
    "ba": "Bachelor's",
    "bsc": "Bachelor's",
    "associates": "Associate's",
    "associate": "Associate's",
    "associate's": "Associate's",
    "diploma": "Diploma",
    "high school": "Diploma",
}


def detect_education_level(text: str) -> EducationLevel | None:
    """Highest degree mentioned in free text, or None."""
    if not text:
        return None
    for level, pattern in DEGREE_RULES:
        if pattern.search(text):
            return level
    return None


def normalize_education_level(value: object) -> EducationLevel | None:
    """Map an arbitrary education string (e.g. AI output) onto the vocabulary."""
    if not isinstance(value, str) or not value.strip():
        return None
    key = value.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    return detect_education_level(value)


def education_rank(level: str | None) -> int:
    return EDUCATION_RANK.get(level or "", 0)
