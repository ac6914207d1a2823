# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Per-request log queue.

Entries are queued while a request is processed and written to the
"image_intake.request" logger in insertion order when the caller flushes
the queue, typically after the response has been sent.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

request_logger = logging.getLogger("image_intake.request")


@dataclass
class LogEntry:
    """A single queued log line."""

    message: str
    level: int = logging.INFO
    fields: dict[str, Any] = field(default_factory=dict)


class RequestLog:
    """
    Append-only log sink owned by a single request.

    Example:
        log = RequestLog(enabled=config.log_enabled)
        log.append("source", source="s3")
        log.time("s3")
        ...
        log.time_end("s3")
        log.flush()
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._entries: list[LogEntry] = []
        self._timers: dict[str, float] = {}

    def append(self, message: str, **fields: Any) -> None:
        """Queue an informational entry."""
        self._entries.append(LogEntry(message, logging.INFO, fields))

    def error(self, message: str, **fields: Any) -> None:
        """Queue an error entry."""
        self._entries.append(LogEntry(message, logging.ERROR, fields))

    def time(self, label: str) -> None:
        """Start a named timer."""
        self._timers[label] = time.monotonic()

    def time_end(self, label: str) -> float | None:
        """
        Stop a named timer and queue its duration.

        Returns:
            Elapsed milliseconds, or None if the timer was never started.
        """
        started = self._timers.pop(label, None)
        if started is None:
            return None
        elapsed_ms = (time.monotonic() - started) * 1000
        self._entries.append(
            LogEntry(f"{label}: {elapsed_ms:.0f}ms", logging.INFO, {"timer": label})
        )
        return elapsed_ms

    @property
    def entries(self) -> list[LogEntry]:
        """Queued entries in insertion order."""
        return list(self._entries)

    def flush(self) -> None:
        """Write queued entries if enabled and clear the queue."""
        if self.enabled:
            for entry in self._entries:
                request_logger.log(
                    entry.level, entry.message, extra={"request_fields": entry.fields}
                )
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["LogEntry", "RequestLog"]
