"""Analysis pipeline: extraction -> scoring -> confidence -> explanation.

Each request is independent. The analyzer holds only immutable collaborators,
so a single instance is shared by all requests.
"""

import logging

from models.responses import AnalysisResponse
from models.schemas.explanation import Explanation
from models.schemas.job_requirements import JobRequirements
from models.schemas.match_result import MatchResult
from models.schemas.resume_profile import ResumeProfile
from services.confidence import ConfidenceEstimator
from services.explainer import Explainer
from services.matcher import Matcher
from services.requirement_extractor import RequirementExtractor
from services.resume_extractor import ResumeProfileBuilder

logger = logging.getLogger(__name__)


class ResumeAnalyzer:
    def __init__(
        self,
        extractor: RequirementExtractor,
        matcher: Matcher | None = None,
        estimator: ConfidenceEstimator | None = None,
        explainer: Explainer | None = None,
        resume_builder: ResumeProfileBuilder | None = None,
    ) -> None:
        self._extractor = extractor
        self._matcher = matcher or Matcher()
        self._estimator = estimator or ConfidenceEstimator()
        self._explainer = explainer or Explainer(self._matcher.config)
        self._resume_builder = resume_builder or ResumeProfileBuilder()

    async def analyze(self, resume_text: str, job_description: str) -> AnalysisResponse:
        """Run the full pipeline on plain resume text."""
        profile = self._resume_builder.build(resume_text)
        return await self.analyze_profile(profile, job_description)

    async def analyze_profile(
        self, profile: ResumeProfile, job_description: str
    ) -> AnalysisResponse:
        """Run the pipeline on an already-structured resume profile."""
        requirements = await self._extractor.extract(job_description)
        match = self._matcher.calculate_match(profile, requirements)
        confidence = self._estimator.estimate(match, requirements, profile)
        explanation = self._explain(match, requirements)

        provenance = requirements.provenance
        degraded = not provenance.used_ai or provenance.used_fallback

        return AnalysisResponse(
            score=match.total_score,
            label=match.label,
            confidence=confidence,
            breakdown=match.breakdown,
            requirements=requirements,
            explanation=explanation,
            degraded=degraded,
        )

    def _explain(
        self, match: MatchResult, requirements: JobRequirements
    ) -> Explanation | None:
        # Auxiliary output: a failure here must not cost the caller the score.
        try:
            return self._explainer.explain(match, requirements)
        except Exception as e:
            logger.error("Explanation generation failed: %s", e, exc_info=True)
            return None
