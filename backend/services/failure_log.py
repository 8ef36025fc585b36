"""Append-only, day-partitioned log of AI failures.

One JSON line per failure in ``<log_dir>/ai-failures-YYYY-MM-DD.log``. Writes
happen in a worker thread and never raise into the scoring path.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200
FILE_PREFIX = "ai-failures-"


class FailureLogSink:
    def __init__(self, log_dir: str | Path) -> None:
        self.log_dir = Path(log_dir)

    def _path_for(self, day: str) -> Path:
        return self.log_dir / f"{FILE_PREFIX}{day}.log"

    def _append(self, path: Path, line: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    async def record(
        self, context: str, error: BaseException, input_text: str | None = None
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": now.isoformat(),
            "context": context,
            "error": {
                "message": str(error) or type(error).__name__,
                "code": getattr(error, "code", None),
            },
            "inputPreview": input_text[:PREVIEW_CHARS] if input_text else None,
        }
        path = self._path_for(now.strftime("%Y-%m-%d"))
        try:
            await asyncio.to_thread(self._append, path, json.dumps(entry))
        except OSError as e:
            logger.warning("Could not write AI failure log %s: %s", path, e)
        return entry

    def stats(self) -> dict[str, Any]:
        if not self.log_dir.is_dir():
            return {"total_failure_logs": 0, "log_files": [], "log_directory": str(self.log_dir)}
        files = sorted(p.name for p in self.log_dir.glob(f"{FILE_PREFIX}*.log"))
        return {
            "total_failure_logs": len(files),
            "log_files": files,
            "log_directory": str(self.log_dir),
        }
