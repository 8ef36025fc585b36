"""Context-aware keyword crediting with stuffing detection.

A keyword used in an experience sentence next to an action verb earns full
credit; one that only appears in a skills list earns half. Repetition and
comma-dumped keyword lists are penalized before density is mapped to points.
"""

import re
from functools import lru_cache

from pydantic import BaseModel

from services.numeric import round_1dp
from services.scoring_config import DEFAULT_SCORING, KeywordDensityConfig

ACTION_VERBS: tuple[str, ...] = (
    # achievement
    "achieved", "accomplished", "delivered", "exceeded", "completed",
    # creation
    "built", "developed", "created", "designed", "implemented", "engineered",
    "architected", "constructed", "established", "programmed", "coded",
    # leadership
    "led", "managed", "directed", "coordinated", "supervised", "mentored",
    "guided", "trained", "facilitated",
    # improvement
    "improved", "enhanced", "optimized", "streamlined", "automated",
    "refactored", "modernized", "upgraded", "migrated",
    # analysis
    "analyzed", "researched", "investigated", "evaluated", "assessed",
    "diagnosed", "tested", "debugged",
    # collaboration
    "collaborated", "partnered", "worked", "contributed", "supported",
    "integrated", "deployed", "launched", "maintained",
)

EXPERIENCE_HEADERS: tuple[str, ...] = (
    "experience", "work experience", "professional experience",
    "employment", "work history", "career", "projects",
    "professional projects", "key projects", "achievements",
)

SKILLS_HEADERS: tuple[str, ...] = (
    "skills", "technical skills", "core competencies",
    "technologies", "expertise", "proficiencies", "tools",
)

_ALL_HEADERS = EXPERIENCE_HEADERS + SKILLS_HEADERS

MAX_CONTEXTUAL_USES = 3
REPETITION_THRESHOLD = 6
REPETITION_PENALTY = 0.10
SKILLS_ONLY_THRESHOLD = 3
SKILLS_ONLY_PENALTY = 0.05
COMMA_DUMP_PENALTY = 0.15
MAX_PENALTY = 0.5

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]\s+")


class KeywordUsage(BaseModel):
    keyword: str
    total_occurrences: int = 0
    contextual_uses: int = 0
    skills_list_uses: int = 0
    credit: float = 0.0


class KeywordDensityResult(BaseModel):
    points: float = 0.0
    max_points: float = 0.0
    density: float = 0.0  # adjusted, 0-1
    base_density: float = 0.0
    contextual_matches: int = 0
    skills_only_matches: int = 0
    total_keywords: int = 0
    stuffing_penalty: float = 0.0
    verdict: str = ""
    matched: list[str] = []
    missing: list[str] = []
    usages: list[KeywordUsage] = []


@lru_cache(maxsize=512)
def _word_re(keyword: str) -> re.Pattern:
    # Lookarounds instead of \b so terms ending in symbols (c++, c#) still match.
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


def count_occurrences(keyword: str, text: str) -> int:
    if not keyword or not text:
        return 0
    return len(_word_re(keyword.lower()).findall(text))


def extract_section(text: str, headers: tuple[str, ...]) -> str | None:
    """Slice from the first listed header found to the nearest later header.

    Headers are plain substrings; the first one in ``headers`` order that occurs
    anywhere in the text opens the section.
    """
    lower = text.lower()
    for header in headers:
        start = lower.find(header)
        if start == -1:
            continue
        end = len(text)
        for other in _ALL_HEADERS:
            if other == header:
                continue
            idx = lower.find(other, start + len(header))
            if idx != -1 and idx < end:
                end = idx
        return text[start:end]
    return None


def count_contextual_uses(keyword: str, experience_text: str) -> int:
    """Sentences mentioning the keyword alongside an action verb, capped at 3."""
    keyword = keyword.lower()
    count = 0
    for sentence in _SENTENCE_SPLIT_RE.split(experience_text.lower()):
        if keyword in sentence and any(verb in sentence for verb in ACTION_VERBS):
            count += 1
    return min(count, MAX_CONTEXTUAL_USES)


def has_comma_dump(text: str, keywords: list[str]) -> bool:
    """True if some line holds every keyword in order, separated by commas.

    Equivalent to matching ``k1.*,.*k2.*,.*k3`` line by line, but scans each
    line once per keyword instead of backtracking.
    """
    terms = [k.lower() for k in keywords if k and k.strip()]
    if len(terms) < 2:
        return False
    for line in text.lower().splitlines():
        pos = line.find(terms[0])
        if pos == -1:
            continue
        pos += len(terms[0])
        for term in terms[1:]:
            comma = line.find(",", pos)
            if comma == -1:
                break
            found = line.find(term, comma + 1)
            if found == -1:
                break
            pos = found + len(term)
        else:
            return True
    return False


def detect_stuffing(text: str, keywords: list[str]) -> float:
    """Summed stuffing penalty, capped at 0.5.

    The repetition and skills-only rules can both fire for the same keyword;
    the only cap is the final one.
    """
    penalty = 0.0
    for keyword in keywords:
        if count_occurrences(keyword, text) >= REPETITION_THRESHOLD:
            penalty += REPETITION_PENALTY

    skills = extract_section(text, SKILLS_HEADERS)
    if skills:
        for keyword in keywords:
            in_skills = count_occurrences(keyword, skills)
            if (
                in_skills >= SKILLS_ONLY_THRESHOLD
                and in_skills == count_occurrences(keyword, text)
            ):
                penalty += SKILLS_ONLY_PENALTY

    if has_comma_dump(text, keywords):
        penalty += COMMA_DUMP_PENALTY

    return min(penalty, MAX_PENALTY)


def _verdict(density: float, penalty: float) -> str:
    suffix = f" ({round(penalty * 100)}% stuffing penalty applied)" if penalty > 0 else ""
    if density >= 0.70:
        return f"Excellent keyword alignment{suffix}"
    if density >= 0.50:
        return f"Good keyword presence{suffix}"
    if density >= 0.30:
        return f"Fair keyword match{suffix}"
    if density >= 0.15:
        return f"Poor keyword alignment{suffix}"
    return f"Very poor keyword match{suffix}"


class KeywordDensityScorer:
    def __init__(self, config: KeywordDensityConfig = DEFAULT_SCORING.keyword_density):
        self._config = config

    def density_to_points(self, density: float, max_points: float) -> float:
        for threshold, fraction in self._config.tiers:
            if density >= threshold:
                return max_points * fraction
        return 0.0

    def analyze_keyword(
        self, keyword: str, text: str, experience: str | None, skills: str | None
    ) -> KeywordUsage:
        contextual = count_contextual_uses(keyword, experience) if experience else 0
        skills_uses = count_occurrences(keyword, skills) if skills else 0
        if contextual > 0:
            credit = 1.0
        elif skills_uses > 0:
            credit = 0.5
        else:
            credit = 0.0
        return KeywordUsage(
            keyword=keyword,
            total_occurrences=count_occurrences(keyword, text),
            contextual_uses=contextual,
            skills_list_uses=skills_uses,
            credit=credit,
        )

    def score(
        self, resume_text: str, keywords: list[str], max_points: float
    ) -> KeywordDensityResult:
        keywords = [k for k in keywords if k and k.strip()]
        if not keywords:
            return KeywordDensityResult(
                max_points=max_points, verdict="No keywords to match"
            )

        text = resume_text or ""
        experience = extract_section(text, EXPERIENCE_HEADERS)
        skills = extract_section(text, SKILLS_HEADERS)
        usages = [self.analyze_keyword(k, text, experience, skills) for k in keywords]

        base_density = sum(u.credit for u in usages) / len(keywords)
        penalty = detect_stuffing(text, keywords)
        adjusted = max(0.0, base_density - penalty)
        points = min(max_points, round_1dp(self.density_to_points(adjusted, max_points)))

        return KeywordDensityResult(
            points=points,
            max_points=max_points,
            density=adjusted,
            base_density=base_density,
            contextual_matches=sum(1 for u in usages if u.contextual_uses > 0),
            skills_only_matches=sum(
                1 for u in usages if u.contextual_uses == 0 and u.skills_list_uses > 0
            ),
            total_keywords=len(keywords),
            stuffing_penalty=penalty,
            verdict=_verdict(adjusted, penalty),
            matched=[u.keyword for u in usages if u.credit > 0],
            missing=[u.keyword for u in usages if u.credit == 0],
            usages=usages,
        )
