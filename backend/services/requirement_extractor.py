"""Requirement extraction coordinator.

Runs the deterministic fallback extractor on every job description, attempts
AI extraction through the reliability gate when a provider is configured, and
merges both into one JobRequirements tagged with its provenance.

The AI attempt resolves to exactly one of:
    AIAccepted         parsed and validated AI output
    ValidationFailure  AI output rejected by the validator
    ExtractionFailure  transport, timeout or malformed JSON
"""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel

from models.schemas.job_requirements import (
    ConfidenceTier,
    EducationLevel,
    JobRequirements,
    Provenance,
)
from models.schemas.validation import ValidationReport
from services.ai_validator import AIResponseValidator
from services.education import normalize_education_level
from services.errors import (
    AIResponseParseError,
    AITimeoutError,
    AITransportError,
    AIUnavailableError,
    ExtractionFailure,
    ValidationFailure,
)
from services.failure_log import FailureLogSink
from services.fallback_extractor import (
    FallbackExtraction,
    FallbackExtractor,
    merge_ai_preferred,
    merge_combine,
)
from services.prompt_builder import build_extraction_prompt
from services.reliable_call import reliable_call

logger = logging.getLogger(__name__)

MAX_EXPERIENCE_YEARS = 30
CONTEXT = "JD Parsing"

_LEADING_INT_RE = re.compile(r"\s*(\d+)")

_FAILURE_TYPES: dict[str, type[ExtractionFailure]] = {
    "timeout": AITimeoutError,
    "transport": AITransportError,
    "parse": AIResponseParseError,
    "unavailable": AIUnavailableError,
}


class ParsedAIResponse(BaseModel):
    """AI output with field types normalized. ``raw`` is kept for validation."""
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    required_experience: int = 0
    education_requirement: EducationLevel | None = None
    responsibilities: list[str] = []
    keywords: list[str] = []
    raw: dict[str, Any] = {}


class ParseError(BaseModel):
    message: str


class AIAccepted(BaseModel):
    parsed: ParsedAIResponse
    confidence: float
    tier: ConfidenceTier
    issues: list[str] = []

    @property
    def is_high_quality(self) -> bool:
        """Non-empty required skills plus at least one other populated field."""
        p = self.parsed
        return bool(p.required_skills) and bool(
            p.preferred_skills or p.keywords or p.education_requirement
        )


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _to_years(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return 0


def _first_json_object(text: str) -> dict[str, Any] | None:
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    return None


def parse_ai_response(text: str) -> ParsedAIResponse | ParseError:
    """Decode the first JSON object in ``text`` (code fences tolerated)."""
    if not text or not text.strip():
        return ParseError(message="Empty AI response")
    raw = _first_json_object(text)
    if raw is None:
        return ParseError(message="No JSON object found in AI response")

    return ParsedAIResponse(
        required_skills=_string_list(raw.get("requiredSkills")),
        preferred_skills=_string_list(raw.get("preferredSkills")),
        required_experience=_to_years(raw.get("requiredExperience")),
        education_requirement=normalize_education_level(raw.get("educationRequirement")),
        responsibilities=_string_list(raw.get("responsibilities")),
        keywords=_string_list(raw.get("keywords")),
        raw=raw,
    )


def _clamp_years(years: int) -> int:
    return max(0, min(MAX_EXPERIENCE_YEARS, years))


def from_fallback(fallback: FallbackExtraction, provenance: Provenance) -> JobRequirements:
    return JobRequirements(
        required_skills=list(fallback.required_skills),
        preferred_skills=list(fallback.preferred_skills),
        required_experience_years=_clamp_years(fallback.experience_years),
        education_requirement=fallback.education,
        keywords=list(fallback.keywords),
        responsibilities=[],
        provenance=provenance,
    )


def merge_with_fallback(
    ai: ParsedAIResponse, fallback: FallbackExtraction, provenance: Provenance
) -> JobRequirements:
    return JobRequirements(
        required_skills=merge_ai_preferred(ai.required_skills, fallback.required_skills),
        preferred_skills=merge_ai_preferred(ai.preferred_skills, fallback.preferred_skills),
        required_experience_years=_clamp_years(
            ai.required_experience or fallback.experience_years
        ),
        education_requirement=ai.education_requirement or fallback.education,
        keywords=merge_combine(ai.keywords, fallback.keywords),
        responsibilities=list(ai.responsibilities),
        provenance=provenance,
    )


class RequirementExtractor:
    def __init__(
        self,
        client: Any,
        fallback: FallbackExtractor | None = None,
        validator: AIResponseValidator | None = None,
        failure_log: FailureLogSink | None = None,
        *,
        timeout: float = 30.0,
        retries: int = 1,
        backoff_seconds: float = 1.0,
        temperature: float = 0.3,
        max_output_tokens: int = 2000,
    ) -> None:
        self._client = client
        self._fallback = fallback or FallbackExtractor()
        self._validator = validator or AIResponseValidator()
        self._failure_log = failure_log
        self._timeout = timeout
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    @property
    def ai_available(self) -> bool:
        return self._client is not None and bool(getattr(self._client, "is_available", False))

    async def extract(self, job_description: str) -> JobRequirements:
        job_description = job_description or ""
        fallback = self._fallback.extract(job_description)

        if not self.ai_available:
            logger.info("AI not configured, using fallback extraction only")
            return from_fallback(fallback, Provenance(used_ai=False, used_fallback=True))

        outcome = await self._attempt_ai(job_description, fallback)

        if isinstance(outcome, AIAccepted):
            high_quality = outcome.is_high_quality
            if not high_quality:
                logger.warning("AI results incomplete, supplementing with fallback")
            provenance = Provenance(
                used_ai=True,
                used_fallback=not high_quality,
                confidence_tier=outcome.tier,
                ai_confidence=outcome.confidence,
                issues=outcome.issues,
            )
            return merge_with_fallback(outcome.parsed, fallback, provenance)

        if isinstance(outcome, ValidationFailure):
            logger.warning("AI response rejected, using fallback: %s", outcome)
            provenance = Provenance(
                used_ai=False,
                used_fallback=True,
                confidence_tier="ACCEPTABLE",
                ai_confidence=outcome.report.confidence,
                issues=outcome.report.issues,
            )
            return from_fallback(fallback, provenance)

        logger.warning("AI extraction failed [%s], using fallback: %s", outcome.code, outcome)
        provenance = Provenance(
            used_ai=False,
            used_fallback=True,
            confidence_tier="POOR",
            ai_confidence=None,
            issues=[f"{outcome.code}: {outcome}"],
        )
        return from_fallback(fallback, provenance)

    async def _attempt_ai(
        self, job_description: str, fallback: FallbackExtraction
    ) -> AIAccepted | ValidationFailure | ExtractionFailure:
        prompt = build_extraction_prompt(job_description)
        reports: list[ValidationReport] = []

        async def op() -> ParsedAIResponse:
            text = await self._client.generate(
                prompt,
                temperature=self._temperature,
                max_output_tokens=self._max_output_tokens,
            )
            parsed = parse_ai_response(text)
            if isinstance(parsed, ParseError):
                raise AIResponseParseError(parsed.message)
            return parsed

        def validate(parsed: ParsedAIResponse) -> ValidationReport:
            report = self._validator.validate(parsed.raw, job_description)
            reports.append(report)
            return report

        result = await reliable_call(
            op,
            context=CONTEXT,
            timeout=self._timeout,
            retries=self._retries,
            validator=validate,
            fallback=lambda: fallback,
            backoff_seconds=self._backoff_seconds,
            failure_log=self._failure_log,
            input_text=job_description,
        )

        if result.failure_kind == "validation" and result.used_fallback:
            return ValidationFailure(reports[-1])
        if result.used_fallback:
            error_type = _FAILURE_TYPES.get(result.failure_kind or "", ExtractionFailure)
            return error_type(result.error or "AI extraction failed")
        return AIAccepted(
            parsed=result.data,
            confidence=result.confidence,
            tier=result.tier,
            issues=result.issues,
        )
