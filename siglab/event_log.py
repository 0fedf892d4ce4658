"""
SigLab Event Log

Append-only, ordered narration of a simulation. Order of entries is the
only record of what happened when: entries are never reordered, edited
or removed one by one. `clear()` drops everything at once.
"""

import itertools
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple


class Actor(str, Enum):
    """Who an entry is attributed to."""
    A = "A"
    B = "B"
    SYSTEM = "System"
    ATTACKER = "Attacker"


class Level(str, Enum):
    """Entry severity, as shown to the observer."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_STDLIB_LEVELS = {
    Level.INFO: logging.INFO,
    Level.SUCCESS: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.ERROR,
}

logger = logging.getLogger("siglab.events")


@dataclass(frozen=True)
class LogEntry:
    """One narrated step."""
    id: int
    actor: Actor
    text: str
    level: Level = Level.INFO
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "actor": self.actor.value,
            "text": self.text,
            "level": self.level.value,
        }


class EventLog:
    """
    Append-only event log.

    Ids keep increasing across clear() so an entry id is never reused
    within one log instance.
    """

    def __init__(self):
        self._entries: List[LogEntry] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def append(self, actor: Actor, text: str, level: Level = Level.INFO) -> LogEntry:
        """Append an entry and mirror it to the `siglab.events` logger."""
        with self._lock:
            entry = LogEntry(
                id=next(self._ids),
                actor=Actor(actor),
                text=text,
                level=Level(level),
            )
            self._entries.append(entry)

        logger.log(
            _STDLIB_LEVELS[entry.level],
            "[%s] %s",
            entry.actor.value,
            entry.text,
            extra={"extra_fields": {"actor": entry.actor.value, "event_level": entry.level.value}},
        )
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def snapshot(self) -> Tuple[LogEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.snapshot()]

    def __len__(self) -> int:
        return len(self.snapshot())

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.snapshot())
