"""Shared dependencies for API routes."""

from functools import lru_cache

from config import settings
from services.failure_log import FailureLogSink
from services.gemini_client import GeminiClient
from services.requirement_extractor import RequirementExtractor
from services.resume_analyzer import ResumeAnalyzer


@lru_cache
def get_gemini_client() -> GeminiClient:
    return GeminiClient(settings.gemini_api_key, settings.gemini_model)


@lru_cache
def get_analyzer() -> ResumeAnalyzer:
    extractor = RequirementExtractor(
        get_gemini_client(),
        failure_log=FailureLogSink(settings.failure_log_dir),
        timeout=settings.ai_timeout_seconds,
        retries=settings.ai_retries,
        backoff_seconds=settings.ai_backoff_seconds,
        temperature=settings.ai_temperature,
        max_output_tokens=settings.ai_max_output_tokens,
    )
    return ResumeAnalyzer(extractor)
