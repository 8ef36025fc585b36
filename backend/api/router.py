from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_analyzer, get_gemini_client
from models.requests import AnalyzeRequest, ProfileAnalyzeRequest
from models.responses import AnalysisResponse
from services.gemini_client import GeminiClient
from services.resume_analyzer import ResumeAnalyzer

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health(client: GeminiClient = Depends(get_gemini_client)):
    return {
        "status": "ok",
        "ai_configured": client.is_available,
    }


@router.post("/analyze", response_model=AnalysisResponse)
@limiter.limit("10/minute")
async def analyze(
    request: Request,
    body: AnalyzeRequest,
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
):
    return await analyzer.analyze(body.resume_text, body.job_description)


@router.post("/analyze/profile", response_model=AnalysisResponse)
@limiter.limit("10/minute")
async def analyze_profile(
    request: Request,
    body: ProfileAnalyzeRequest,
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
):
    return await analyzer.analyze_profile(body.profile, body.job_description)
