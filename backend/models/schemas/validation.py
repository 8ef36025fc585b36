"""Contracts for the AI reliability gate."""

from typing import Any, Literal

from pydantic import BaseModel

from models.schemas.job_requirements import ConfidenceTier

FailureKind = Literal["validation", "timeout", "transport", "parse", "unavailable"]


class ValidationReport(BaseModel):
    """Verdict of the AI response validator."""
    is_valid: bool = False
    confidence: float = 0.0
    tier: ConfidenceTier = "UNRELIABLE"
    issues: list[str] = []
    should_use_fallback: bool = True


class ReliableCallResult(BaseModel):
    """Outcome of one guarded AI call (after retries and fallback)."""
    success: bool = False
    data: Any = None
    confidence: float = 0.0
    tier: ConfidenceTier = "UNRELIABLE"
    used_fallback: bool = False
    issues: list[str] = []
    error: str | None = None
    failure_kind: FailureKind | None = None
    attempts: int = 0
