from pydantic import BaseModel

from models.schemas.confidence import ConfidenceAssessment
from models.schemas.explanation import Explanation
from models.schemas.job_requirements import JobRequirements
from models.schemas.match_result import CategoryScoreResult


class AnalysisResponse(BaseModel):
    score: int = 0
    label: str = ""
    confidence: ConfidenceAssessment = ConfidenceAssessment()
    breakdown: list[CategoryScoreResult] = []
    requirements: JobRequirements = JobRequirements()
    explanation: Explanation | None = None  # None if explanation generation failed
    degraded: bool = False  # AI not used, or its output was replaced by the fallback
