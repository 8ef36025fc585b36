"""Human-readable explanation of a MatchResult.

Template-driven: every sentence is derived from category points, verdicts
and the matched/missing lists. No AI involvement.
"""

from models.schemas.explanation import (
    CategoryJustification,
    Explanation,
    Gap,
    Recommendation,
    Strength,
)
from models.schemas.job_requirements import JobRequirements
from models.schemas.match_result import CategoryScoreResult, MatchResult
from services.scoring_config import DEFAULT_SCORING, ScoringConfig

CATEGORY_TITLES: dict[str, str] = {
    "required_skills": "Required Skills",
    "experience": "Experience",
    "education": "Education",
    "preferred_skills": "Preferred Skills",
    "keyword_density": "Keyword Density",
    "format_clarity": "Format & Clarity",
}

_SUMMARIES: tuple[tuple[int, str], ...] = (
    (90, "Outstanding match ({score}/100). This resume demonstrates exceptional alignment "
         "with the job requirements across multiple dimensions."),
    (76, "Very strong match ({score}/100). The candidate meets most critical criteria "
         "with only minor gaps."),
    (61, "Good match ({score}/100). The candidate has relevant qualifications but some "
         "important gaps exist."),
    (41, "Fair match ({score}/100). Several important qualifications are missing or "
         "insufficient."),
    (0, "Poor match ({score}/100). Significant gaps exist across multiple critical areas."),
)


def _listing(items: list[str], limit: int = 5) -> str:
    text = ", ".join(items[:limit])
    return text + ("..." if len(items) > limit else "")


def _percentage(category: CategoryScoreResult) -> int:
    if category.max_points <= 0:
        return 0
    return round(category.points_earned / category.max_points * 100)


class Explainer:
    def __init__(self, config: ScoringConfig = DEFAULT_SCORING) -> None:
        self._config = config

    def explain(self, match: MatchResult, requirements: JobRequirements) -> Explanation:
        return Explanation(
            summary=self.summary(match),
            strengths=self.strengths(match),
            gaps=self.gaps(match),
            recommendations=self.recommendations(match, requirements),
            justification=self.justification(match),
        )

    def summary(self, match: MatchResult) -> str:
        for minimum, template in _SUMMARIES:
            if match.total_score >= minimum:
                return template.format(score=match.total_score)
        return _SUMMARIES[-1][1].format(score=match.total_score)

    def _get(self, match: MatchResult, name: str) -> CategoryScoreResult:
        return match.category(name) or CategoryScoreResult(category=name)

    def strengths(self, match: MatchResult) -> list[Strength]:
        required = self._get(match, "required_skills")
        experience = self._get(match, "experience")
        education = self._get(match, "education")
        preferred = self._get(match, "preferred_skills")
        keywords = self._get(match, "keyword_density")
        out: list[Strength] = []

        if required.matched:
            total = required.details.get("total_required", len(required.matched))
            out.append(Strength(
                category="Required Skills",
                description=f"Possesses {len(required.matched)} of {total} required skills",
                evidence=_listing(required.matched),
                impact=f"+{required.points_earned:.1f} points",
            ))
        if required.partial_matches:
            out.append(Strength(
                category="Related Skills",
                description=f"Has {len(required.partial_matches)} related skills to requirements",
                evidence=_listing([m.explanation or m.required_skill for m in required.partial_matches], 3),
                impact="Partial credit given (at most 50% per skill)",
            ))
        if experience.points_earned > 15:
            out.append(Strength(
                category="Experience",
                description=experience.verdict,
                evidence=(
                    f"{experience.details.get('actual')} years "
                    f"(required: {experience.details.get('required')})"
                ),
                impact=f"+{experience.points_earned:.1f} points",
            ))
        if education.points_earned >= 10:
            out.append(Strength(
                category="Education",
                description=education.verdict,
                evidence=(
                    f"{education.details.get('highest_degree')} "
                    f"(required: {education.details.get('required') or 'None specified'})"
                ),
                impact=f"+{education.points_earned:.1f} points",
            ))
        if preferred.matched:
            out.append(Strength(
                category="Preferred Skills",
                description=f"Has {len(preferred.matched)} preferred/bonus skills",
                evidence=_listing(preferred.matched),
                impact=f"+{preferred.points_earned:.1f} points",
            ))
        density = keywords.details.get("density") or 0
        if density >= 50:
            out.append(Strength(
                category="Keyword Alignment",
                description=keywords.verdict,
                evidence=f"{density}% density - {_listing(keywords.matched)}",
                impact=f"+{keywords.points_earned:.1f} points",
            ))

        if not out:
            out.append(Strength(
                category="General",
                description="Resume was successfully parsed",
                evidence="Basic format is readable",
                impact="Minimal points",
            ))
        return out

    def gaps(self, match: MatchResult) -> list[Gap]:
        required = self._get(match, "required_skills")
        experience = self._get(match, "experience")
        education = self._get(match, "education")
        keywords = self._get(match, "keyword_density")
        fmt = self._get(match, "format_clarity")
        per_skill = self._config.required_skills.points_per_skill
        out: list[Gap] = []

        if required.missing:
            out.append(Gap(
                category="Missing Required Skills",
                severity="CRITICAL",
                description=f"{len(required.missing)} required skills are missing from the resume",
                specifics=", ".join(required.missing),
                impact=f"-{len(required.missing) * per_skill:g} points",
                priority=1,
            ))

        difference = experience.details.get("difference") or 0
        lost = experience.max_points - experience.points_earned
        if difference < -2:
            short = abs(difference)
            out.append(Gap(
                category="Experience Shortage",
                severity="CRITICAL" if short >= 4 else "HIGH",
                description=experience.verdict,
                specifics=(
                    f"{short:g} years below requirement (has {experience.details.get('actual')}, "
                    f"needs {experience.details.get('required')})"
                ),
                impact=f"-{lost:.1f} points",
                priority=2,
            ))
        elif difference >= 5:
            out.append(Gap(
                category="Over-Qualification",
                severity="MEDIUM",
                description="Candidate is significantly over-qualified",
                specifics=f"{difference:g} years above requirement",
                impact=f"-{lost:.1f} points",
                priority=4,
            ))

        if education.details.get("required") and education.points_earned < 10:
            out.append(Gap(
                category="Education Requirement",
                severity="CRITICAL" if education.points_earned == 0 else "MEDIUM",
                description=education.verdict,
                specifics=(
                    f"Required: {education.details.get('required')}, "
                    f"Found: {education.details.get('highest_degree') or 'None found'}"
                ),
                impact=f"-{education.max_points - education.points_earned:.1f} points",
                priority=3,
            ))

        density = keywords.details.get("density") or 0
        if density < 30:
            out.append(Gap(
                category="Keyword Alignment",
                severity="MEDIUM",
                description="Resume lacks key industry/role terminology",
                specifics=f"Only {density}% keyword match",
                impact=f"-{keywords.max_points - keywords.points_earned:.1f} points",
                priority=5,
            ))

        if fmt.points_earned < 3:
            out.append(Gap(
                category="Resume Format",
                severity="LOW",
                description="Resume has formatting or parsing issues",
                specifics=fmt.verdict,
                impact=f"-{fmt.max_points - fmt.points_earned:.1f} points",
                priority=6,
            ))

        return sorted(out, key=lambda g: g.priority)

    def recommendations(
        self, match: MatchResult, requirements: JobRequirements
    ) -> list[Recommendation]:
        required = self._get(match, "required_skills")
        experience = self._get(match, "experience")
        education = self._get(match, "education")
        preferred = self._get(match, "preferred_skills")
        keywords = self._get(match, "keyword_density")
        fmt = self._get(match, "format_clarity")
        per_skill = self._config.required_skills.points_per_skill
        out: list[Recommendation] = []

        if required.missing:
            out.append(Recommendation(
                priority="HIGH",
                action="Add Missing Required Skills",
                details=(
                    "Include these required skills in your resume if you have them: "
                    f"{_listing(required.missing)}"
                ),
                expected_impact=f"+{len(required.missing) * per_skill:g} points if all added",
            ))
        if (experience.details.get("difference") or 0) < -1:
            out.append(Recommendation(
                priority="MEDIUM",
                action="Highlight Relevant Experience",
                details=(
                    "Emphasize responsibilities and achievements that demonstrate experience "
                    "equivalent to the required years, including internships or major projects."
                ),
                expected_impact="May partially offset experience gap",
            ))
        if education.details.get("required") and education.points_earned < 10:
            out.append(Recommendation(
                priority="MEDIUM",
                action="Address Education Requirement",
                details=(
                    "Highlight relevant certifications, ongoing education, or equivalent "
                    f"practical experience for the {education.details.get('required')} requirement."
                ),
                expected_impact="Limited points but improves overall perception",
            ))
        if (keywords.details.get("density") or 0) < 50:
            out.append(Recommendation(
                priority="MEDIUM",
                action="Optimize for Keywords",
                details=(
                    "Use role-relevant terms from the job description in experience bullets "
                    "next to what you built or delivered, not only in a skills list."
                ),
                expected_impact=f"Potential +{keywords.max_points - keywords.points_earned:.1f} points",
            ))

        matched_preferred = {s.lower() for s in preferred.matched}
        unmatched = [s for s in requirements.preferred_skills if s.lower() not in matched_preferred]
        if unmatched:
            pref_cfg = self._config.preferred_skills
            gain = min(len(unmatched), pref_cfg.max_skills_counted) * pref_cfg.points_per_skill
            out.append(Recommendation(
                priority="LOW",
                action="Add Preferred Skills",
                details=f"Consider adding these bonus skills if relevant: {_listing(unmatched)}",
                expected_impact=f"Up to +{min(gain, preferred.max_points - preferred.points_earned):g} points",
            ))
        if fmt.points_earned < fmt.max_points:
            out.append(Recommendation(
                priority="LOW",
                action="Improve Resume Format",
                details=(
                    "Keep the resume ATS-friendly with clear sections and standard headers "
                    'like "Experience", "Education", "Skills".'
                ),
                expected_impact=f"+{fmt.max_points - fmt.points_earned:.1f} points",
            ))
        return out

    def justification(self, match: MatchResult) -> list[CategoryJustification]:
        out: list[CategoryJustification] = []
        for category in match.breakdown:
            if category.category == "required_skills" and category.details:
                explanation = (
                    f"Matched {len(category.matched)}/{category.details.get('total_required')} "
                    f"required skills, {len(category.partial_matches)} partial, "
                    f"missing {len(category.missing)}"
                )
            else:
                explanation = category.verdict
            out.append(CategoryJustification(
                category=CATEGORY_TITLES.get(category.category, category.category),
                earned=round(category.points_earned, 2),
                possible=category.max_points,
                percentage=_percentage(category),
                explanation=explanation,
            ))
        return out
