"""Logging callback implementation."""

import json
import structlog
from pathlib import Path
from typing import Any, Optional, TextIO

from relaysearch.callbacks.base import AttemptLog, AttemptStatus, Callback

logger = structlog.get_logger()


class LoggingCallback(Callback):
    """Callback for logging host attempts to the console and/or a file."""

    def __init__(
        self,
        *,
        file_path: Optional[str | Path] = None,
        console: bool = True,
    ) -> None:
        """Initialize the logging callback.

        Args:
            file_path: Path to a JSON-lines log file (optional)
            console: Whether to log to console
        """
        self.file_path = Path(file_path) if file_path else None
        self.console = console
        self._file_handle: Optional[TextIO] = None

        if self.file_path:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(self.file_path, "a")

    def _log_to_dict(self, log: AttemptLog) -> dict[str, Any]:
        data = {
            "request_id": log.request_id,
            "timestamp": log.timestamp.isoformat(),
            "operation": log.operation,
            "method": log.method,
            "path": log.path,
            "host": log.host,
            "attempt": log.attempt,
            "status": log.status.value,
            "latency_ms": log.latency_ms,
        }
        if log.status_label:
            data["status_label"] = log.status_label
        if log.error_message:
            data["error_message"] = log.error_message
        return data

    def _write(self, data: dict[str, Any]) -> None:
        if self._file_handle:
            self._file_handle.write(json.dumps(data, default=str) + "\n")
            self._file_handle.flush()

    async def on_attempt_start(self, log: AttemptLog) -> None:
        """Log attempt start."""
        data = self._log_to_dict(log)
        data["event"] = "attempt_start"

        if self.console:
            logger.debug(
                "attempt_started",
                request_id=log.request_id,
                host=log.host,
                method=log.method,
                path=log.path,
            )
        self._write(data)

    async def on_attempt_end(self, log: AttemptLog) -> None:
        """Log attempt completion, at a level matching its status."""
        data = self._log_to_dict(log)
        data["event"] = "attempt_end"

        if self.console:
            fields = {
                "request_id": log.request_id,
                "host": log.host,
                "status": log.status.value,
                "latency_ms": log.latency_ms,
            }
            if log.status is AttemptStatus.SUCCESS:
                logger.info("attempt_succeeded", **fields)
            elif log.status is AttemptStatus.CANCELLED:
                logger.info("attempt_cancelled", **fields)
            else:
                logger.warning(
                    "attempt_failed",
                    status_label=log.status_label,
                    error_message=log.error_message,
                    **fields,
                )
        self._write(data)

    def close(self) -> None:
        """Close the log file."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

    def __del__(self) -> None:
        self.close()
