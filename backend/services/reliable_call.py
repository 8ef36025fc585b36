"""Timeout, retry and fallback wrapper around a single AI operation.

The call is driven as an explicit state machine:

    ATTEMPTING -> SUCCEEDED                      (op returned in time)
    ATTEMPTING -> RETRYING -> ATTEMPTING         (failure, attempts left)
    ATTEMPTING -> EXHAUSTED -> FALLBACK | raise  (failure, none left)

When a fallback is supplied the call never raises.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from models.schemas.validation import ReliableCallResult, ValidationReport
from services.ai_validator import get_confidence_tier
from services.errors import (
    AITimeoutError,
    AITransportError,
    AIUnavailableError,
    ExtractionFailure,
)
from services.failure_log import FailureLogSink

logger = logging.getLogger(__name__)

UNVALIDATED_CONFIDENCE = 0.8
REJECTED_FALLBACK_CONFIDENCE = 0.5
FAILED_FALLBACK_CONFIDENCE = 0.3


class CallState(Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"
    FALLBACK = "fallback"


def _as_extraction_failure(exc: Exception, context: str, timeout: float) -> ExtractionFailure:
    if isinstance(exc, ExtractionFailure):
        return exc
    if isinstance(exc, asyncio.TimeoutError):
        err: ExtractionFailure = AITimeoutError(
            f"AI timeout: {context} took longer than {timeout:g}s"
        )
    else:
        err = AITransportError(str(exc) or type(exc).__name__)
    err.__cause__ = exc
    return err


async def _run_fallback(fallback: Callable[[], Any]) -> Any:
    result = fallback()
    if inspect.isawaitable(result):
        result = await result
    return result


async def reliable_call(
    op: Callable[[], Awaitable[Any]],
    *,
    context: str,
    timeout: float,
    retries: int,
    validator: Callable[[Any], ValidationReport] | None = None,
    fallback: Callable[[], Any] | None = None,
    backoff_seconds: float = 1.0,
    failure_log: FailureLogSink | None = None,
    input_text: str | None = None,
) -> ReliableCallResult:
    max_attempts = max(0, retries) + 1
    state = CallState.ATTEMPTING
    attempt = 0
    data: Any = None
    last_error: ExtractionFailure | None = None

    while True:
        if state is CallState.ATTEMPTING:
            attempt += 1
            logger.info("%s (attempt %d/%d)", context, attempt, max_attempts)
            try:
                data = await asyncio.wait_for(op(), timeout)
            except Exception as e:
                last_error = _as_extraction_failure(e, context, timeout)
                logger.error(
                    "%s attempt %d failed [%s]: %s",
                    context, attempt, last_error.code, last_error,
                )
                unavailable = isinstance(last_error, AIUnavailableError)
                if failure_log is not None and not unavailable:
                    await failure_log.record(context, last_error, input_text)
                if unavailable or attempt >= max_attempts:
                    state = CallState.EXHAUSTED
                else:
                    state = CallState.RETRYING
            else:
                state = CallState.SUCCEEDED

        elif state is CallState.RETRYING:
            delay = backoff_seconds * attempt
            if delay > 0:
                await asyncio.sleep(delay)
            state = CallState.ATTEMPTING

        elif state is CallState.SUCCEEDED:
            if validator is None:
                return ReliableCallResult(
                    success=True,
                    data=data,
                    confidence=UNVALIDATED_CONFIDENCE,
                    tier=get_confidence_tier(UNVALIDATED_CONFIDENCE),
                    attempts=attempt,
                )

            report = validator(data)
            logger.info(
                "%s confidence: %d%% (%s)",
                context, round(report.confidence * 100), report.tier,
            )
            if report.issues:
                logger.warning("%s issues: %s", context, ", ".join(report.issues))

            if report.should_use_fallback and fallback is not None:
                logger.warning("%s: low confidence, using fallback", context)
                return ReliableCallResult(
                    success=True,
                    data=await _run_fallback(fallback),
                    confidence=REJECTED_FALLBACK_CONFIDENCE,
                    tier=get_confidence_tier(REJECTED_FALLBACK_CONFIDENCE),
                    used_fallback=True,
                    issues=report.issues,
                    failure_kind="validation",
                    attempts=attempt,
                )

            return ReliableCallResult(
                success=True,
                data=data,
                confidence=report.confidence,
                tier=report.tier,
                issues=report.issues,
                failure_kind="validation" if report.should_use_fallback else None,
                attempts=attempt,
            )

        elif state is CallState.EXHAUSTED:
            if fallback is None:
                raise last_error
            state = CallState.FALLBACK

        elif state is CallState.FALLBACK:
            logger.warning("%s: all attempts failed, using fallback", context)
            return ReliableCallResult(
                success=False,
                data=await _run_fallback(fallback),
                confidence=FAILED_FALLBACK_CONFIDENCE,
                tier=get_confidence_tier(FAILED_FALLBACK_CONFIDENCE),
                used_fallback=True,
                error=str(last_error),
                failure_kind=last_error.kind,
                attempts=attempt,
            )
