import asyncio
import json

import pytest

from models.schemas.validation import ValidationReport
from services.errors import AITimeoutError, AITransportError, AIUnavailableError
from services.failure_log import FailureLogSink
from services.reliable_call import reliable_call


class Flaky:
    """Async op that fails ``failures`` times before returning ``result``."""

    def __init__(self, failures, result="ok", exc=None):
        self.failures = failures
        self.result = result
        self.exc = exc or AITransportError("connection reset")
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return self.result


def reject(_data):
    return ValidationReport(
        is_valid=False,
        confidence=0.2,
        tier="UNRELIABLE",
        issues=["requiredSkills is not an array"],
        should_use_fallback=True,
    )


async def slow():
    await asyncio.sleep(1)
    return "late"


@pytest.mark.asyncio
async def test_success_without_validator():
    result = await reliable_call(Flaky(0), context="Test", timeout=1, retries=2)
    assert result.success
    assert result.data == "ok"
    assert result.confidence == 0.8
    assert result.tier == "GOOD"
    assert result.attempts == 1
    assert not result.used_fallback


@pytest.mark.asyncio
async def test_retries_until_success():
    op = Flaky(1)
    result = await reliable_call(op, context="Test", timeout=1, retries=1, backoff_seconds=0)
    assert result.data == "ok"
    assert result.attempts == 2
    assert op.calls == 2


@pytest.mark.asyncio
async def test_timeout_uses_fallback():
    result = await reliable_call(
        slow, context="Test", timeout=0.01, retries=0, fallback=lambda: "fallback"
    )
    assert not result.success
    assert result.used_fallback
    assert result.data == "fallback"
    assert result.failure_kind == "timeout"
    assert result.confidence == 0.3
    assert result.tier == "POOR"


@pytest.mark.asyncio
async def test_async_fallback():
    async def fallback():
        return "async fallback"

    result = await reliable_call(
        Flaky(5), context="Test", timeout=1, retries=0, fallback=fallback
    )
    assert result.data == "async fallback"
    assert result.failure_kind == "transport"


@pytest.mark.asyncio
async def test_exhausted_without_fallback_raises():
    with pytest.raises(AITransportError):
        await reliable_call(Flaky(5), context="Test", timeout=1, retries=1, backoff_seconds=0)


@pytest.mark.asyncio
async def test_timeout_without_fallback_raises_timeout_error():
    with pytest.raises(AITimeoutError):
        await reliable_call(slow, context="Test", timeout=0.01, retries=0)


@pytest.mark.asyncio
async def test_unexpected_errors_are_wrapped():
    with pytest.raises(AITransportError) as excinfo:
        await reliable_call(
            Flaky(1, exc=ValueError("bad payload")), context="Test", timeout=1, retries=0
        )
    assert isinstance(excinfo.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_unavailable_is_not_retried():
    op = Flaky(5, exc=AIUnavailableError("no key"))
    result = await reliable_call(
        op, context="Test", timeout=1, retries=3, backoff_seconds=0, fallback=lambda: "fb"
    )
    assert op.calls == 1
    assert result.failure_kind == "unavailable"


@pytest.mark.asyncio
async def test_rejected_output_uses_fallback():
    result = await reliable_call(
        Flaky(0), context="Test", timeout=1, retries=0, validator=reject, fallback=lambda: "fb"
    )
    assert result.success
    assert result.used_fallback
    assert result.data == "fb"
    assert result.confidence == 0.5
    assert result.tier == "ACCEPTABLE"
    assert result.failure_kind == "validation"
    assert result.issues == ["requiredSkills is not an array"]


@pytest.mark.asyncio
async def test_rejected_output_without_fallback_is_returned():
    result = await reliable_call(Flaky(0), context="Test", timeout=1, retries=0, validator=reject)
    assert result.data == "ok"
    assert not result.used_fallback
    assert result.confidence == 0.2


@pytest.mark.asyncio
async def test_failures_are_logged(tmp_path):
    sink = FailureLogSink(tmp_path)
    await reliable_call(
        Flaky(5),
        context="JD Parsing",
        timeout=1,
        retries=1,
        backoff_seconds=0,
        fallback=lambda: None,
        failure_log=sink,
        input_text="x" * 500,
    )

    files = list(tmp_path.glob("ai-failures-*.log"))
    assert len(files) == 1
    entries = [json.loads(line) for line in files[0].read_text().splitlines()]
    assert len(entries) == 2
    assert entries[0]["context"] == "JD Parsing"
    assert entries[0]["error"]["code"] == "AI_TRANSPORT"
    assert len(entries[0]["inputPreview"]) == 200


@pytest.mark.asyncio
async def test_unavailable_is_not_logged(tmp_path):
    sink = FailureLogSink(tmp_path)
    await reliable_call(
        Flaky(1, exc=AIUnavailableError("no key")),
        context="Test",
        timeout=1,
        retries=0,
        fallback=lambda: None,
        failure_log=sink,
    )
    assert sink.stats()["total_failure_logs"] == 0


class TestFailureLogSink:
    @pytest.mark.asyncio
    async def test_write_errors_are_swallowed(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        sink = FailureLogSink(blocker)
        entry = await sink.record("Test", AITransportError("boom"), "input")
        assert entry["error"]["message"] == "boom"

    @pytest.mark.asyncio
    async def test_stats(self, tmp_path):
        sink = FailureLogSink(tmp_path / "logs")
        assert sink.stats()["total_failure_logs"] == 0
        await sink.record("Test", AITimeoutError("slow"))
        stats = sink.stats()
        assert stats["total_failure_logs"] == 1
        assert stats["log_files"][0].startswith("ai-failures-")
