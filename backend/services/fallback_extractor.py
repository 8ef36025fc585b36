"""Deterministic, rule-based job description extraction.

Used alone when no AI provider is configured or the AI response is rejected,
and alongside accepted AI output to fill gaps. Each extraction step is an
ordered list of (pattern, extractor) rules run by ``first_match``.
"""

import logging
import re
from collections import Counter
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from models.schemas.job_requirements import EducationLevel
from services.education import detect_education_level

logger = logging.getLogger(__name__)

MAX_EXPERIENCE_YEARS = 30
MAX_KEYWORDS = 30
MIN_KEYWORD_LENGTH = 4
REPEATED_MENTIONS = 2

Rule = tuple[re.Pattern, Callable[[re.Match], Any]]

EXPERIENCE_RULES: tuple[Rule, ...] = (
    # "5+ years of experience", "5 plus years experience"
    (
        re.compile(r"(\d+)\s*\+?\s*(?:plus)?\s*years?\s+(?:of\s+)?experience", re.IGNORECASE),
        lambda m: int(m.group(1)),
    ),
    # "minimum 5 years", "at least 3 years"
    (
        re.compile(r"(?:minimum|at least|minimum of)\s+(\d+)\s+years?", re.IGNORECASE),
        lambda m: int(m.group(1)),
    ),
    # "3 to 5 years", "3-5 years": the lower bound
    (
        re.compile(r"(\d+)\s*(?:to|-)\s*(\d+)\s+years?", re.IGNORECASE),
        lambda m: int(m.group(1)),
    ),
    # "experience: 5 years", "required: 5 years"
    (
        re.compile(r"(?:experience|required):\s*(\d+)\s+years?", re.IGNORECASE),
        lambda m: int(m.group(1)),
    ),
    # "5 years experience"
    (
        re.compile(r"(\d+)\s+years?\s+experience", re.IGNORECASE),
        lambda m: int(m.group(1)),
    ),
)

REQUIRED_HEADERS: tuple[str, ...] = (
    "required", "requirements", "must have", "must-have",
    "essential", "mandatory", "qualifications",
)

PREFERRED_HEADERS: tuple[str, ...] = (
    "preferred", "nice to have", "nice-to-have", "bonus",
    "plus", "desirable", "advantage", "beneficial",
)

TECH_VOCABULARY: tuple[str, ...] = (
    # languages
    "python", "java", "javascript", "typescript", "c++", "c#", "go", "golang",
    "ruby", "php", "swift", "kotlin", "rust", "scala", "matlab",
    # frontend
    "react", "reactjs", "react.js", "angular", "angularjs", "vue", "vuejs", "vue.js",
    "next.js", "nextjs", "svelte", "html", "css", "sass", "scss", "tailwind",
    # backend
    "node.js", "nodejs", "express", "express.js", "django", "flask", "fastapi",
    "spring", "spring boot", ".net", "asp.net", "rails", "laravel",
    # databases
    "sql", "nosql", "mysql", "postgresql", "postgres", "mongodb", "redis",
    "elasticsearch", "cassandra", "dynamodb", "oracle", "sqlite",
    # cloud and devops
    "aws", "azure", "gcp", "google cloud", "docker", "kubernetes", "k8s",
    "ci/cd", "jenkins", "gitlab", "github actions", "terraform", "ansible",
    # apis and architecture
    "rest", "restful", "rest api", "graphql", "grpc", "microservices",
    "api design", "soap", "webhooks",
    # tools
    "git", "github", "bitbucket", "jira", "confluence", "slack",
    "webpack", "babel", "npm", "yarn", "maven", "gradle",
    # methodologies
    "agile", "scrum", "kanban", "tdd", "test driven development",
    "devops", "unit testing", "integration testing",
    # data and ml
    "machine learning", "deep learning", "tensorflow", "pytorch", "scikit-learn",
    "pandas", "numpy", "data analysis", "big data", "spark", "hadoop",
    # mobile
    "ios", "android", "react native", "flutter", "xamarin", "mobile development",
)

STOP_WORDS = frozenset({
    "the", "and", "for", "with", "this", "that", "from", "have",
    "been", "will", "would", "should", "could", "your", "their",
    "about", "into", "through", "during", "before", "after",
    "above", "below", "between", "under", "again", "further",
    "then", "once", "here", "there", "when", "where", "what",
})

_NON_WORD_RE = re.compile(r"[^\w]")
# "Benefits:", "## Responsibilities", "About us:" and similar
_GENERIC_HEADING_RE = re.compile(r"^\s*(?:#+|[A-Za-z][A-Za-z ]{0,30}:)")
_LINE_PREFIX = r"^\s*(?:#+\s*|[-*•]\s*)?"


class FallbackExtraction(BaseModel):
    experience_years: int = 0
    education: EducationLevel | None = None
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    keywords: list[str] = []


def first_match(
    rules: tuple[Rule, ...],
    text: str,
    accept: Callable[[Any], bool] = lambda value: True,
) -> Any | None:
    """Run rules in order; return the first extracted value that is accepted."""
    for pattern, extract in rules:
        match = pattern.search(text)
        if match is None:
            continue
        value = extract(match)
        if accept(value):
            return value
    return None


@lru_cache(maxsize=256)
def _term_re(term: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


@lru_cache(maxsize=64)
def _header_re(header: str) -> re.Pattern:
    return re.compile(rf"{_LINE_PREFIX}{re.escape(header)}(?=[:\s]|$)", re.IGNORECASE)


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out


def merge_ai_preferred(ai: list[str] | None, fallback: list[str] | None) -> list[str]:
    """Keep AI order, then append fallback items the AI did not list."""
    if not ai:
        return list(fallback or [])
    if not fallback:
        return list(ai)
    seen = {item.lower() for item in ai}
    merged = list(ai)
    for item in fallback:
        if item.lower() not in seen:
            seen.add(item.lower())
            merged.append(item)
    return merged


def merge_combine(ai: list[str] | None, fallback: list[str] | None) -> list[str]:
    """Case-insensitive union, lowercased, AI items first."""
    if not ai:
        return list(fallback or [])
    if not fallback:
        return list(ai)
    return _dedupe([item.lower() for item in [*ai, *fallback]])


class FallbackExtractor:
    def __init__(self, vocabulary: tuple[str, ...] = TECH_VOCABULARY) -> None:
        self._vocabulary = vocabulary
        self._section_headers = REQUIRED_HEADERS + PREFERRED_HEADERS

    def extract(self, text: str) -> FallbackExtraction:
        text = text or ""
        result = FallbackExtraction(
            experience_years=self.extract_experience_years(text),
            education=self.extract_education(text),
            required_skills=self.extract_required_skills(text),
            preferred_skills=self.extract_preferred_skills(text),
            keywords=self.extract_keywords(text),
        )
        logger.debug(
            "Fallback extraction: %d required, %d preferred, %d keywords, %dy, %s",
            len(result.required_skills),
            len(result.preferred_skills),
            len(result.keywords),
            result.experience_years,
            result.education,
        )
        return result

    def extract_experience_years(self, text: str) -> int:
        years = first_match(
            EXPERIENCE_RULES, text, accept=lambda y: 0 <= y <= MAX_EXPERIENCE_YEARS
        )
        return years or 0

    def extract_education(self, text: str) -> EducationLevel | None:
        return detect_education_level(text)

    def skills_in(self, text: str) -> list[str]:
        """Vocabulary terms present in ``text``, in vocabulary order."""
        return [term for term in self._vocabulary if _term_re(term).search(text)]

    def extract_sections(self, text: str, headers: tuple[str, ...]) -> list[str]:
        """Bodies of the sections opened by any of ``headers``.

        A section starts at a line beginning with the header and runs until the
        next line that starts with a recognized header or looks like a heading.
        """
        lines = text.splitlines()
        sections: list[str] = []
        for header in headers:
            pattern = _header_re(header)
            for i, line in enumerate(lines):
                match = pattern.match(line)
                if match is None:
                    continue
                body = [line[match.end():].lstrip(": \t")]
                for following in lines[i + 1:]:
                    if self._is_heading(following):
                        break
                    body.append(following)
                content = "\n".join(body).strip()
                if content:
                    sections.append(content)
                break
        return sections

    def _is_heading(self, line: str) -> bool:
        if _GENERIC_HEADING_RE.match(line):
            return True
        return any(_header_re(h).match(line) for h in self._section_headers)

    def _marked(self, text: str, markers: str) -> list[str]:
        return [
            term
            for term in self._vocabulary
            if re.search(
                rf"(?<!\w){re.escape(term)}\s+(?:is\s+)?(?:{markers})",
                text,
                re.IGNORECASE,
            )
        ]

    def extract_required_skills(self, text: str) -> list[str]:
        found: list[str] = []
        for section in self.extract_sections(text, REQUIRED_HEADERS):
            found.extend(self.skills_in(section))

        for term in self.skills_in(text):
            if len(_term_re(term).findall(text)) >= REPEATED_MENTIONS:
                found.append(term)

        found.extend(self._marked(text, "required|mandatory|essential"))
        return _dedupe(found)

    def extract_preferred_skills(self, text: str) -> list[str]:
        found: list[str] = []
        for section in self.extract_sections(text, PREFERRED_HEADERS):
            found.extend(self.skills_in(section))
        found.extend(self._marked(text, "preferred|nice|bonus|plus"))
        return _dedupe(found)

    def extract_keywords(self, text: str) -> list[str]:
        counts: Counter[str] = Counter()
        for word in text.split():
            cleaned = _NON_WORD_RE.sub("", word).lower()
            if len(cleaned) >= MIN_KEYWORD_LENGTH and cleaned not in STOP_WORDS:
                counts[cleaned] += 1
        return [word for word, _ in counts.most_common(MAX_KEYWORDS)]
