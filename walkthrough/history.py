"""Event log for the walkthrough.

Append-only: one entry per stage transition, in the order the transitions
were processed. ``reset`` is the only way to shrink it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)

_TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    message: str

    @property
    def timestamp_text(self) -> str:
        return self.timestamp.strftime(_TIME_FORMAT)

    @property
    def line(self) -> str:
        return f"[{self.timestamp_text}] {self.message}"


class EventLog:
    """Ordered, append-only sequence of LogEntry records."""

    def __init__(self, boot_message: str, at: datetime):
        self._entries: list[LogEntry] = [LogEntry(timestamp=at, message=boot_message)]

    def append(self, message: str, at: datetime) -> LogEntry:
        entry = LogEntry(timestamp=at, message=message)
        self._entries.append(entry)
        logger.debug("Log entry #%d: %s", len(self._entries) - 1, message)
        return entry

    def reset(self, message: str, at: datetime) -> None:
        """Drop everything and start over from a single entry."""
        self._entries = [LogEntry(timestamp=at, message=message)]

    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)
