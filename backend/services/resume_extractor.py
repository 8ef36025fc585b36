"""Plain-text resume -> ResumeProfile.

Binary decoding (PDF/DOCX) happens upstream; this module only structures text
that has already been extracted.
"""

import logging
import re
from datetime import datetime

from models.schemas.resume_profile import (
    ContactInfo,
    EducationEntry,
    ExperienceEntry,
    ResumeProfile,
)
from services.education import detect_education_level
from services.fallback_extractor import FallbackExtractor
from services.section_parser import (
    DATE_RANGE_RE,
    extract_contact_info,
    extract_explicit_years,
    months_between,
    parse_sections,
)

logger = logging.getLogger(__name__)

_SKILL_SPLIT_RE = re.compile(r"[,;|•\n]")
_BULLET_RE = re.compile(r"^[\s\-*•·▪◦]+")
_INSTITUTION_RE = re.compile(
    r"[^|,\n]*\b(?:University|College|Institute|School|Academy)\b[^|,\n]*"
)
# Characters outside these count as formatting noise.
_SPECIAL_CHAR_RE = re.compile(r"[^\w\s.,;:()\-'\"@]", re.ASCII)
_STRUCTURE_RE = re.compile(r"\b(?:experience|education|skills)\b", re.IGNORECASE)

MAX_SKILL_LENGTH = 40
MAX_PARSE_QUALITY = 5


def assess_parse_quality(text: str) -> int:
    """0-5 ordinal of how cleanly the text survived extraction."""
    quality = MAX_PARSE_QUALITY
    if len(text) < 500:
        quality -= 3
    elif len(text) < 1000:
        quality -= 1

    if len(_SPECIAL_CHAR_RE.findall(text)) > len(text) * 0.1:
        quality -= 2

    if not _STRUCTURE_RE.search(text):
        quality -= 2

    return max(0, quality)


def _clean_title(line: str) -> str:
    title = DATE_RANGE_RE.sub("", line)
    title = _BULLET_RE.sub("", title)
    return title.strip(" |,-–—\t")


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out


class ResumeProfileBuilder:
    def __init__(self, vocabulary: FallbackExtractor | None = None) -> None:
        self._vocabulary = vocabulary or FallbackExtractor()

    def build(self, text: str, today: datetime | None = None) -> ResumeProfile:
        text = text or ""
        sections = parse_sections(text)

        experience_entries = self.extract_experience_entries(
            sections.get("experience") or text, today
        )
        total_months = sum(e.duration_months for e in experience_entries)
        total_years = max(extract_explicit_years(text), round(total_months / 12, 1))

        profile = ResumeProfile(
            raw_text=text,
            contact=ContactInfo(**extract_contact_info(text)),
            experience_entries=experience_entries,
            education_entries=self.extract_education_entries(
                sections.get("education") or text
            ),
            skills=self.extract_skills(text, sections.get("skills", "")),
            total_years_experience=total_years,
            parse_quality=assess_parse_quality(text),
        )
        logger.debug(
            "Resume profile: %d roles, %.1fy, %d skills, quality %d",
            len(profile.experience_entries),
            profile.total_years_experience,
            len(profile.skills),
            profile.parse_quality,
        )
        return profile

    def extract_experience_entries(
        self, text: str, today: datetime | None = None
    ) -> list[ExperienceEntry]:
        lines = text.split("\n")
        entries: list[ExperienceEntry] = []
        for i, line in enumerate(lines):
            match = DATE_RANGE_RE.search(line)
            if match is None:
                continue
            description: list[str] = []
            for following in lines[i + 1:]:
                if DATE_RANGE_RE.search(following):
                    break
                if following.strip():
                    description.append(_BULLET_RE.sub("", following).strip())
            entries.append(
                ExperienceEntry(
                    title=_clean_title(line),
                    start_date=match.group(1),
                    end_date=match.group(2),
                    duration_months=months_between(match.group(1), match.group(2), today),
                    description="\n".join(description),
                )
            )
        return entries

    def extract_education_entries(self, text: str) -> list[EducationEntry]:
        entries: list[EducationEntry] = []
        for line in text.split("\n"):
            stripped = _BULLET_RE.sub("", line).strip()
            level = detect_education_level(stripped)
            if level is None:
                continue
            institution = _INSTITUTION_RE.search(stripped)
            entries.append(
                EducationEntry(
                    degree=stripped,
                    level=level,
                    institution=institution.group().strip() if institution else "",
                )
            )
        return entries

    def extract_skills(self, text: str, skills_section: str) -> list[str]:
        """Skills-section items first, then vocabulary terms found anywhere."""
        items: list[str] = []
        for raw in _SKILL_SPLIT_RE.split(skills_section):
            item = _BULLET_RE.sub("", raw)
            if ":" in item:
                item = item.rsplit(":", 1)[1]
            item = item.strip(" .\t")
            if 0 < len(item) <= MAX_SKILL_LENGTH:
                items.append(item)
        items.extend(self._vocabulary.skills_in(text))
        return _dedupe(items)
