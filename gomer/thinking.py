"""Bot thinking log: ordered, timestamped narration for the UI pane."""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class ThinkingLogEntry:
    message: str
    timestamp: int  # epoch milliseconds


class ThinkingLog:
    def __init__(self):
        self._entries: list[ThinkingLogEntry] = []

    @property
    def entries(self) -> tuple[ThinkingLogEntry, ...]:
        return tuple(self._entries)

    def add(self, message: str) -> ThinkingLogEntry:
        entry = ThinkingLogEntry(message=message, timestamp=int(time.time() * 1000))
        self._entries.append(entry)
        return entry

    def clear(self):
        self._entries.clear()
