"""Resume section segmentation, contact extraction and date-range parsing."""

import re
from datetime import datetime

# Section header patterns and their canonical names
SECTION_PATTERNS: dict[str, list[str]] = {
    "experience": [
        r"(?:work|professional|employment)\s*(?:experience|history)",
        r"experience",
        r"career\s*(?:history|summary)",
    ],
    "education": [
        r"education(?:al)?\s*(?:background|qualifications|history)?",
        r"academic\s*(?:background|qualifications)",
    ],
    "skills": [
        r"(?:technical|core|key|professional)?\s*skills",
        r"(?:technical|core)?\s*(?:competencies|proficiencies|expertise)",
        r"technologies",
        r"tools",
    ],
    "summary": [
        r"(?:professional|executive|career)?\s*summary",
        r"(?:career|professional)?\s*objective",
        r"profile",
    ],
    "projects": [r"(?:key|notable|selected|personal)?\s*projects"],
    "certifications": [r"certific(?:ations?|ates?)"],
    "achievements": [r"(?:key\s+)?achievements?", r"(?:awards?|honors?)"],
}

_COMPILED: dict[str, re.Pattern] = {
    section: re.compile(rf"^\s*(?:{'|'.join(patterns)})\s*:?\s*$", re.IGNORECASE)
    for section, patterns in SECTION_PATTERNS.items()
}

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
PHONE_RE = re.compile(r"\+?\(?\d[\d\s\-().]{6,14}\d")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/[\w-]+", re.IGNORECASE)
GITHUB_RE = re.compile(r"github\.com/[\w-]+", re.IGNORECASE)

# "5+ years of experience", "3 yrs experience"
EXP_YEARS_RE = re.compile(
    r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s+)?(?:experience|exp\b)",
    re.IGNORECASE,
)

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|"
    r"Jul(?:y)?|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
# "Jan 2019 - Present", "2020 - 2023", "March 2018 – Nov 2022"
DATE_RANGE_RE = re.compile(
    rf"({_MONTHS}\.?\s*\d{{4}}|\d{{4}})"
    r"\s*(?:-|–|—|to)\s*"
    rf"({_MONTHS}\.?\s*\d{{4}}|\d{{4}}|[Pp]resent|[Cc]urrent)",
    re.IGNORECASE,
)

_MONTH_MAP = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "sept": 9,
    "september": 9, "oct": 10, "october": 10, "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

MAX_ROLE_MONTHS = 600


def section_for_heading(line: str) -> str | None:
    """Canonical section name if ``line`` is a bare heading, else None."""
    stripped = line.strip()
    if not stripped:
        return None
    return next(
        (name for name, pattern in _COMPILED.items() if pattern.match(stripped)), None
    )


def parse_sections(text: str) -> dict[str, str]:
    """Split resume text into sections keyed by canonical name.

    Text before the first heading is kept under 'header'. A heading that appears
    twice (two "Experience" blocks) extends the earlier section. Sections with no
    content are dropped.
    """
    buckets: dict[str, list[str]] = {"header": []}
    current = "header"
    for line in text.split("\n"):
        name = section_for_heading(line)
        if name is None:
            buckets[current].append(line)
        else:
            current = name
            buckets.setdefault(current, [])

    return {
        name: "\n".join(lines).strip()
        for name, lines in buckets.items()
        if any(line.strip() for line in lines)
    }


def extract_contact_info(text: str) -> dict[str, str | None]:
    email = EMAIL_RE.search(text)
    phone = PHONE_RE.search(text)
    linkedin = LINKEDIN_RE.search(text)
    github = GITHUB_RE.search(text)
    return {
        "email": email.group() if email else None,
        "phone": phone.group().strip() if phone else None,
        "linkedin": linkedin.group() if linkedin else None,
        "github": github.group() if github else None,
    }


def parse_date(date_str: str, today: datetime | None = None) -> tuple[int, int]:
    """Parse a date string into (year, month). Bare years map to January.

    Returns (0, 0) when the string is not a recognizable date.
    """
    date_str = date_str.strip().rstrip(".")
    if date_str.lower() in ("present", "current"):
        now = today or datetime.now()
        return now.year, now.month

    parts = date_str.replace(".", " ").split()
    if len(parts) == 2:
        month = _MONTH_MAP.get(parts[0].lower())
        if month and parts[1].isdigit():
            return int(parts[1]), month

    if date_str.isdigit():
        year = int(date_str)
        if 1970 <= year <= 2100:
            return year, 1

    return 0, 0


def months_between(start: str, end: str, today: datetime | None = None) -> int:
    start_year, start_month = parse_date(start, today)
    end_year, end_month = parse_date(end, today)
    if start_year <= 0 or end_year <= 0:
        return 0
    months = (end_year - start_year) * 12 + (end_month - start_month)
    if 0 < months < MAX_ROLE_MONTHS:
        return months
    return 0


def extract_explicit_years(text: str) -> float:
    """Largest "N years of experience" claim in the text."""
    best = 0.0
    for match in EXP_YEARS_RE.finditer(text):
        best = max(best, float(match.group(1)))
    return best
