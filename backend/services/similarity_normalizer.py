"""Map a continuous similarity (e.g. cosine) onto bounded, tiered points.

Each tier interpolates independently from its own floor, so the top of HIGH
(0.79 -> 20.53) is worth more than the bottom of EXCEPTIONAL (0.80 -> 0.00).
Points are truncated to two decimals, never rounded up.
"""

from typing import Literal

from pydantic import BaseModel

from services.numeric import floor_2dp

SimilarityTier = Literal["EXCEPTIONAL", "HIGH", "MEDIUM", "LOW", "NONE"]

DEFAULT_MAX_POINTS = 25.0

# (tier, lower bound inclusive, upper bound, point ceiling), highest first
SIMILARITY_TIERS: tuple[tuple[SimilarityTier, float, float, float], ...] = (
    ("EXCEPTIONAL", 0.80, 1.00, 25),
    ("HIGH", 0.65, 0.80, 22),
    ("MEDIUM", 0.50, 0.65, 15),
    ("LOW", 0.35, 0.50, 8),
    ("NONE", 0.00, 0.35, 0),
)

_TIER_LABELS: dict[str, str] = {
    "EXCEPTIONAL": "Exceptional match",
    "HIGH": "High relevance",
    "MEDIUM": "Medium relevance",
    "LOW": "Low relevance",
    "NONE": "Not relevant",
}


class NormalizedSimilarity(BaseModel):
    points: float
    similarity: float
    tier: SimilarityTier
    tier_max_points: float
    explanation: str


def _clamp(similarity: float) -> float:
    return max(0.0, min(1.0, similarity))


def get_tier(similarity: float) -> SimilarityTier:
    sim = _clamp(similarity)
    for tier, lower, _, _ in SIMILARITY_TIERS:
        if sim >= lower:
            return tier
    return "NONE"


def _tier_bounds(tier: SimilarityTier) -> tuple[float, float, float]:
    for name, lower, upper, ceiling in SIMILARITY_TIERS:
        if name == tier:
            return lower, upper, ceiling
    raise KeyError(tier)


def normalize_similarity(
    similarity: float, max_points: float = DEFAULT_MAX_POINTS
) -> NormalizedSimilarity:
    sim = _clamp(similarity)
    tier = get_tier(sim)
    lower, upper, ceiling = _tier_bounds(tier)

    if tier == "NONE":
        points = 0.0
    else:
        progress = (sim - lower) / (upper - lower)
        points = progress * ceiling
        if max_points != DEFAULT_MAX_POINTS:
            points = points / DEFAULT_MAX_POINTS * max_points
        points = floor_2dp(points)

    pct = round(sim * 100)
    label = _TIER_LABELS[tier]
    if tier == "NONE":
        explanation = f"{pct}% similarity - {label} - No points awarded"
    else:
        explanation = f"{pct}% similarity - {label} - {points:.1f}/{max_points:g} points"

    return NormalizedSimilarity(
        points=points,
        similarity=sim,
        tier=tier,
        tier_max_points=ceiling,
        explanation=explanation,
    )


def normalize_batch(
    similarities: list[float], max_points: float = DEFAULT_MAX_POINTS
) -> list[NormalizedSimilarity]:
    return [normalize_similarity(s, max_points) for s in similarities]
