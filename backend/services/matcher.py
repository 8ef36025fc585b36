"""Scoring engine: six weighted category scorers and their aggregation.

Stateless per request. Holds only immutable configuration and the skill
resolver / keyword scorer it delegates to, so one instance can serve
concurrent requests.
"""

import logging

from models.schemas.job_requirements import JobRequirements
from models.schemas.match_result import CategoryScoreResult, MatchResult
from models.schemas.resume_profile import ResumeProfile
from models.schemas.skill_match import SkillMatch
from services.education import EDUCATION_RANK, detect_education_level, education_rank
from services.keyword_density import KeywordDensityScorer
from services.numeric import round_half_up
from services.scoring_config import (
    DEFAULT_SCORING,
    ScoringConfig,
    check_weights,
    score_range_for,
)
from services.skill_similarity import SkillSimilarityResolver

logger = logging.getLogger(__name__)


def _format_details(parse_quality: int) -> str:
    if parse_quality >= 5:
        return "Perfect - Clean, well-structured resume"
    if parse_quality >= 3:
        return "Good - Minor formatting issues"
    if parse_quality >= 1:
        return "Fair - Some parsing difficulties"
    return "Poor - Significant formatting issues"


def highest_degree(profile: ResumeProfile) -> str | None:
    """Highest recognized degree across the profile's education entries."""
    best: str | None = None
    for entry in profile.education_entries or []:
        level = entry.level if entry.level in EDUCATION_RANK else detect_education_level(entry.degree)
        if education_rank(level) > education_rank(best):
            best = level
    return best


class Matcher:
    def __init__(
        self,
        config: ScoringConfig = DEFAULT_SCORING,
        resolver: SkillSimilarityResolver | None = None,
        keyword_scorer: KeywordDensityScorer | None = None,
    ) -> None:
        check_weights(config.weights)
        self._config = config
        self._resolver = resolver or SkillSimilarityResolver()
        self._keywords = keyword_scorer or KeywordDensityScorer(config.keyword_density)

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def calculate_match(
        self, profile: ResumeProfile, requirements: JobRequirements
    ) -> MatchResult:
        breakdown = [
            self.score_required_skills(profile, requirements),
            self.score_experience(profile, requirements),
            self.score_education(profile, requirements),
            self.score_preferred_skills(profile, requirements),
            self.score_keyword_density(profile, requirements),
            self.score_format(profile),
        ]
        raw_total = sum(c.points_earned for c in breakdown)
        total = max(0, min(100, round_half_up(raw_total)))
        score_range = score_range_for(total)
        logger.info(
            "Match scored %d (%s): %s",
            total,
            score_range.label,
            ", ".join(f"{c.category}={c.points_earned:g}" for c in breakdown),
        )
        return MatchResult(total_score=total, label=score_range.label, breakdown=breakdown)

    def score_required_skills(
        self, profile: ResumeProfile, requirements: JobRequirements
    ) -> CategoryScoreResult:
        max_points = self._config.weights.required_skills
        required = requirements.required_skills or []
        if not required:
            return CategoryScoreResult(
                category="required_skills",
                points_earned=self._config.required_skills.no_requirements_points,
                max_points=max_points,
                verdict="No required skills specified in job description",
            )

        per_skill = self._config.required_skills.points_per_skill
        full_match = self._config.required_skills.full_match_confidence
        candidates = profile.skills or []

        # A category never starts above what its listed skills can earn.
        attainable = min(max_points, len(required) * per_skill)
        points = attainable
        matched: list[str] = []
        missing: list[str] = []
        partial: list[SkillMatch] = []

        for skill in required:
            match = self._resolver.calculate_skill_credit(skill, candidates)
            if match.credit >= full_match:
                matched.append(skill)
            elif match.credit > 0:
                partial.append(match)
                points -= per_skill * (1 - match.credit)
            else:
                missing.append(skill)
                points -= per_skill

        points = max(0.0, points)
        return CategoryScoreResult(
            category="required_skills",
            points_earned=points,
            max_points=max_points,
            verdict=(
                f"{len(matched)} of {len(required)} required skills matched"
                f", {len(partial)} partial, {len(missing)} missing"
            ),
            matched=matched,
            missing=missing,
            partial_matches=partial,
            details={"total_required": len(required), "attainable_points": attainable},
        )

    def score_experience(
        self, profile: ResumeProfile, requirements: JobRequirements
    ) -> CategoryScoreResult:
        max_points = self._config.weights.experience
        cfg = self._config.experience
        required = requirements.required_experience_years or 0
        actual = profile.total_years_experience or 0.0

        if required == 0:
            fraction = 0.0
            for min_years, tier_fraction in cfg.tenure_tiers:
                if actual >= min_years:
                    fraction = tier_fraction
                    break
            return CategoryScoreResult(
                category="experience",
                points_earned=round_half_up(max_points * fraction),
                max_points=max_points,
                verdict=f"No specific requirement - {actual:g} years credited",
                details={"required": 0, "actual": actual, "difference": 0},
            )

        difference = actual - required
        if 0 <= difference < 5:
            penalty, verdict = 0.0, "Excellent match"
        elif difference >= 5:
            penalty, verdict = cfg.over_qualified_5_plus, "Over-qualified (may be flight risk)"
        elif difference >= -2:
            penalty, verdict = cfg.short_0_2_years, "0-2 years short"
        elif difference >= -4:
            penalty, verdict = cfg.short_2_4_years, "2-4 years short"
        else:
            penalty, verdict = (
                cfg.short_4_plus_years,
                "4+ years short (significantly under-qualified)",
            )

        return CategoryScoreResult(
            category="experience",
            points_earned=max(0.0, max_points - penalty),
            max_points=max_points,
            verdict=verdict,
            details={"required": required, "actual": actual, "difference": difference},
        )

    def score_education(
        self, profile: ResumeProfile, requirements: JobRequirements
    ) -> CategoryScoreResult:
        max_points = self._config.weights.education
        cfg = self._config.education
        required = requirements.education_requirement
        highest = highest_degree(profile)
        details = {"required": required, "highest_degree": highest}

        if not required:
            fraction = cfg.no_requirement_fraction.get(highest or "", 0.0)
            return CategoryScoreResult(
                category="education",
                points_earned=round_half_up(max_points * fraction),
                max_points=max_points,
                verdict=f"No requirement - {highest or 'no degree'} credited",
                matched=[highest] if highest else [],
                details=details,
            )

        held, needed = education_rank(highest), education_rank(required)
        if held >= needed:
            points, verdict = cfg.meets_requirement, "Meets or exceeds requirement"
        elif held == needed - 1:
            points, verdict = (
                cfg.one_level_below,
                "One level below (may be acceptable with experience)",
            )
        else:
            points, verdict = cfg.below_requirement, "Does not meet requirement"

        return CategoryScoreResult(
            category="education",
            points_earned=min(max_points, points),
            max_points=max_points,
            verdict=verdict,
            matched=[highest] if highest and held >= needed else [],
            missing=[required] if held < needed else [],
            details=details,
        )

    def score_preferred_skills(
        self, profile: ResumeProfile, requirements: JobRequirements
    ) -> CategoryScoreResult:
        max_points = self._config.weights.preferred_skills
        cfg = self._config.preferred_skills
        preferred = requirements.preferred_skills or []
        if not preferred:
            return CategoryScoreResult(
                category="preferred_skills",
                max_points=max_points,
                verdict="No preferred skills specified",
            )

        candidates = profile.skills or []
        matched: list[str] = []
        missing: list[str] = []
        for skill in preferred:
            match = self._resolver.calculate_skill_credit(skill, candidates)
            if match.credit >= cfg.min_confidence:
                matched.append(skill)
            else:
                missing.append(skill)

        counted = min(len(matched), cfg.max_skills_counted)
        return CategoryScoreResult(
            category="preferred_skills",
            points_earned=min(max_points, counted * cfg.points_per_skill),
            max_points=max_points,
            verdict=f"{len(matched)} of {len(preferred)} preferred skills matched",
            matched=matched,
            missing=missing,
            details={"total_preferred": len(preferred), "skills_counted": counted},
        )

    def score_keyword_density(
        self, profile: ResumeProfile, requirements: JobRequirements
    ) -> CategoryScoreResult:
        max_points = self._config.weights.keyword_density
        result = self._keywords.score(
            profile.raw_text or "", requirements.keywords or [], max_points
        )
        return CategoryScoreResult(
            category="keyword_density",
            points_earned=max(0.0, min(max_points, result.points)),
            max_points=max_points,
            verdict=result.verdict,
            matched=result.matched,
            missing=result.missing,
            details={
                "density": round(result.density * 100),
                "base_density": round(result.base_density * 100),
                "stuffing_penalty": round(result.stuffing_penalty * 100),
                "contextual_matches": result.contextual_matches,
                "skills_only_matches": result.skills_only_matches,
            },
        )

    def score_format(self, profile: ResumeProfile) -> CategoryScoreResult:
        max_points = self._config.weights.format_clarity
        quality = profile.parse_quality or 0
        return CategoryScoreResult(
            category="format_clarity",
            points_earned=max(0, min(max_points, quality)),
            max_points=max_points,
            verdict=_format_details(quality),
            details={"parse_quality": quality},
        )
