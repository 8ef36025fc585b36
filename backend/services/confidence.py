"""Five-factor confidence estimate for a final match score.

overall = 100 - sum(weight_i * (100 - subscore_i)), floored at 0. Each
sub-score only ever lowers the total through its own shortfall, so raising any
single factor never lowers the overall confidence.
"""

import logging

import numpy as np

from models.schemas.confidence import (
    ConfidenceAssessment,
    ConfidenceFactor,
    DisplayRange,
)
from models.schemas.job_requirements import JobRequirements, Provenance
from models.schemas.match_result import MatchResult
from models.schemas.resume_profile import ResumeProfile
from services.numeric import round_half_up

logger = logging.getLogger(__name__)

FACTOR_WEIGHTS: dict[str, float] = {
    "Job Description Parsing": 0.30,
    "Resume Parsing": 0.20,
    "Skill Matching": 0.25,
    "Data Completeness": 0.15,
    "AI Reliability": 0.10,
}

_AI_TIER_SCORES: dict[str, float] = {
    "EXCELLENT": 100,
    "GOOD": 85,
    "ACCEPTABLE": 70,
    "POOR": 55,
    "UNRELIABLE": 40,
}

DEFAULT_FACTOR_SCORE = 70.0

# (minimum overall confidence, +/- band, tier), highest first
BANDS: tuple[tuple[int, int, str], ...] = (
    (85, 3, "HIGH"),
    (65, 5, "MEDIUM"),
    (0, 8, "LOW"),
)


def jd_parsing_score(provenance: Provenance | None) -> float:
    if provenance is None:
        return DEFAULT_FACTOR_SCORE
    if provenance.used_ai and not provenance.used_fallback:
        if provenance.confidence_tier in ("EXCELLENT", "GOOD"):
            return 95
        if provenance.confidence_tier == "ACCEPTABLE":
            return 80
        return 70
    if provenance.used_ai and provenance.used_fallback:
        return 75
    return 65


def resume_parsing_score(parse_quality: int) -> float:
    if parse_quality >= 5:
        return 100
    if parse_quality >= 4:
        return 85
    if parse_quality >= 3:
        return 70
    if parse_quality >= 2:
        return 55
    return 40


def skill_matching_score(match: MatchResult) -> float:
    required = match.category("required_skills")
    if required is None:
        return DEFAULT_FACTOR_SCORE
    exact = len(required.matched)
    partial = len(required.partial_matches)
    total = exact + partial + len(required.missing) or 1

    exact_rate = exact / total
    partial_rate = partial / total
    if exact_rate >= 0.8:
        return 95
    if exact_rate >= 0.6:
        return 85
    if exact_rate >= 0.4:
        return 75
    if partial_rate >= 0.5:
        return 65
    return 50


def completeness_score(requirements: JobRequirements, profile: ResumeProfile | None) -> float:
    score = 100
    if not requirements.required_skills:
        score -= 20
    if not requirements.keywords:
        score -= 10
    if not requirements.required_experience_years:
        score -= 10
    if profile is None or (not profile.raw_text.strip() and not profile.skills):
        score -= 20
    return max(0, score)


def ai_reliability_score(provenance: Provenance | None) -> float:
    if provenance is None or provenance.confidence_tier is None:
        return DEFAULT_FACTOR_SCORE
    return _AI_TIER_SCORES[provenance.confidence_tier]


def combine(scores: list[float], weights: list[float]) -> int:
    shortfall = np.dot(np.asarray(weights, dtype=float), 100.0 - np.asarray(scores, dtype=float))
    return max(0, min(100, round_half_up(100.0 - float(shortfall))))


def band_for(confidence: int) -> tuple[int, str]:
    for minimum, band, tier in BANDS:
        if confidence >= minimum:
            return band, tier
    return BANDS[-1][1], BANDS[-1][2]


def _skill_note(match: MatchResult) -> str:
    required = match.category("required_skills")
    if required is None or not (required.matched or required.partial_matches or required.missing):
        return "Unable to assess"
    exact, partial = len(required.matched), len(required.partial_matches)
    if exact >= partial * 2:
        return "Mostly exact matches"
    if partial > exact:
        return "Mostly partial matches"
    return "Mixed exact and partial matches"


def _jd_note(provenance: Provenance | None) -> str:
    if provenance is None:
        return "Not assessed"
    if provenance.used_ai and provenance.used_fallback:
        return "AI parsing supplemented by fallback parser"
    if provenance.used_ai:
        return "AI parsing successful"
    return "Used fallback parser"


def _ai_note(provenance: Provenance | None) -> str:
    if provenance is None or provenance.confidence_tier is None:
        return "Not assessed"
    if provenance.used_fallback:
        return f"AI {provenance.confidence_tier} - Fallback used"
    return f"AI {provenance.confidence_tier}"


class ConfidenceEstimator:
    def __init__(self, weights: dict[str, float] | None = None) -> None:
        self._weights = dict(weights or FACTOR_WEIGHTS)

    def estimate(
        self,
        match: MatchResult,
        requirements: JobRequirements,
        profile: ResumeProfile | None,
    ) -> ConfidenceAssessment:
        provenance = requirements.provenance
        parse_quality = profile.parse_quality if profile is not None else 0

        factors = [
            ConfidenceFactor(
                factor="Job Description Parsing",
                weight=self._weights["Job Description Parsing"],
                score=jd_parsing_score(provenance),
                note=_jd_note(provenance),
            ),
            ConfidenceFactor(
                factor="Resume Parsing",
                weight=self._weights["Resume Parsing"],
                score=resume_parsing_score(parse_quality),
                note=f"Parse quality {parse_quality}/5",
            ),
            ConfidenceFactor(
                factor="Skill Matching",
                weight=self._weights["Skill Matching"],
                score=skill_matching_score(match),
                note=_skill_note(match),
            ),
            ConfidenceFactor(
                factor="Data Completeness",
                weight=self._weights["Data Completeness"],
                score=completeness_score(requirements, profile),
            ),
            ConfidenceFactor(
                factor="AI Reliability",
                weight=self._weights["AI Reliability"],
                score=ai_reliability_score(provenance),
                note=_ai_note(provenance),
            ),
        ]

        overall = combine([f.score for f in factors], [f.weight for f in factors])
        band, tier = band_for(overall)
        score = match.total_score
        logger.info("Confidence %d%% (%s, +/-%d)", overall, tier, band)

        return ConfidenceAssessment(
            overall_confidence=overall,
            band=band,
            tier=tier,
            factors=factors,
            display_range=DisplayRange(min=max(0, score - band), max=min(100, score + band)),
            explanation=(
                f"Based on parsing quality and AI reliability, we are {overall}% confident "
                f"in this score. The actual score could reasonably be +/-{band} points "
                "from the reported value."
            ),
        )
