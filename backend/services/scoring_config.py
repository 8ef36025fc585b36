"""Static scoring configuration.

Loaded once per process and never mutated. Weights are checked at import time
so a bad edit fails the service at startup instead of inside a request.
"""

from pydantic import BaseModel, ConfigDict

from services.errors import ConfigurationError


class CategoryWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_skills: float = 35
    experience: float = 25
    education: float = 15
    preferred_skills: float = 10
    keyword_density: float = 10
    format_clarity: float = 5

    @property
    def total(self) -> float:
        return (
            self.required_skills
            + self.experience
            + self.education
            + self.preferred_skills
            + self.keyword_density
            + self.format_clarity
        )


class RequiredSkillsConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    points_per_skill: float = 7
    full_match_confidence: float = 0.9
    no_requirements_points: float = 0


class ExperienceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    short_0_2_years: float = 8
    short_2_4_years: float = 15
    short_4_plus_years: float = 25
    over_qualified_5_plus: float = 5
    # (minimum years, fraction of max) when the JD states no requirement
    tenure_tiers: tuple[tuple[float, float], ...] = (
        (10, 1.0),
        (5, 0.8),
        (3, 0.6),
        (1, 0.4),
    )


class EducationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    meets_requirement: float = 15
    one_level_below: float = 5
    below_requirement: float = 0
    # fraction of max by highest degree when the JD states no requirement
    no_requirement_fraction: dict[str, float] = {
        "PhD": 1.0,
        "Master's": 0.8,
        "Bachelor's": 0.6,
        "Associate's": 0.4,
        "Diploma": 0.2,
    }


class PreferredSkillsConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    points_per_skill: float = 2
    max_skills_counted: int = 5
    min_confidence: float = 0.7


class KeywordDensityConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # (minimum adjusted density, fraction of max), highest first
    tiers: tuple[tuple[float, float], ...] = (
        (0.70, 1.0),
        (0.50, 0.7),
        (0.30, 0.4),
        (0.15, 0.2),
    )


class ScoreRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    min: int
    max: int
    label: str


SCORE_RANGES: tuple[ScoreRange, ...] = (
    ScoreRange(key="EXCEPTIONAL", min=90, max=100, label="Exceptional Match"),
    ScoreRange(key="VERY_GOOD", min=76, max=89, label="Very Good Match"),
    ScoreRange(key="GOOD", min=61, max=75, label="Good Match"),
    ScoreRange(key="FAIR", min=41, max=60, label="Fair Match"),
    ScoreRange(key="POOR", min=0, max=40, label="Poor Match"),
)


class ScoringConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    weights: CategoryWeights = CategoryWeights()
    required_skills: RequiredSkillsConfig = RequiredSkillsConfig()
    experience: ExperienceConfig = ExperienceConfig()
    education: EducationConfig = EducationConfig()
    preferred_skills: PreferredSkillsConfig = PreferredSkillsConfig()
    keyword_density: KeywordDensityConfig = KeywordDensityConfig()


def check_weights(weights: CategoryWeights) -> None:
    """Raise ConfigurationError unless the six weights sum to exactly 100."""
    if abs(weights.total - 100) > 1e-9:
        raise ConfigurationError(
            f"Category weights must sum to 100, got {weights.total:g}"
        )


def score_range_for(score: int) -> ScoreRange:
    for score_range in SCORE_RANGES:
        if score_range.min <= score <= score_range.max:
            return score_range
    return SCORE_RANGES[-1]


DEFAULT_SCORING = ScoringConfig()
check_weights(DEFAULT_SCORING.weights)
