"""Error taxonomy for the scoring engine.

Per-request failures (extraction, validation) are absorbed by the pipeline and
reported through provenance and confidence. Only ConfigurationError is fatal,
and only at startup.
"""

from models.schemas.validation import ValidationReport


class ExtractionFailure(Exception):
    """AI extraction failed (transport, timeout, malformed output)."""

    code = "AI_EXTRACTION_FAILED"
    kind = "transport"


class AITransportError(ExtractionFailure):
    code = "AI_TRANSPORT"
    kind = "transport"


class AITimeoutError(ExtractionFailure):
    code = "AI_TIMEOUT"
    kind = "timeout"


class AIResponseParseError(ExtractionFailure):
    code = "AI_INVALID_JSON"
    kind = "parse"


class AIUnavailableError(ExtractionFailure):
    """No AI provider configured. Not worth retrying."""

    code = "AI_UNAVAILABLE"
    kind = "unavailable"


class ValidationFailure(Exception):
    """AI output was well-formed but failed schema or hallucination checks."""

    code = "AI_VALIDATION_FAILED"

    def __init__(self, report: ValidationReport) -> None:
        super().__init__("; ".join(report.issues) or "AI response rejected")
        self.report = report


class ConfigurationError(Exception):
    """Invalid static configuration (e.g. category weights not summing to 100)."""


class ComputationError(Exception):
    """A scorer met data it cannot use. Scorers substitute defaults instead of raising."""
