"""Table event log.

Every structural change to the process table is recorded as an event,
much like the kernel ring buffer that ``dmesg`` prints on Linux.
Ignored operations (a bad parent id, a full table) are recorded too, so
the menu can stay silent while the log still explains what happened.

Each event carries *what* happened (its ``EventKind``) and *which*
process it concerns, so callers can ask "what happened to pid 3?"
without parsing messages.
"""

from dataclasses import dataclass
from enum import IntEnum, StrEnum


class LogLevel(IntEnum):
    """Severity of an event; higher is more serious."""

    INFO = 1
    WARNING = 2


class EventKind(StrEnum):
    """The table operation an event records."""

    RESET = "reset"
    CREATE = "create"
    DESTROY = "destroy"
    TEARDOWN = "teardown"
    IGNORED = "ignored"


@dataclass(frozen=True)
class LogEntry:
    """One table event.

    Attributes:
        kind: The operation that produced the event.
        message: Human-readable description.
        pid: The process the event concerns (the new child for CREATE,
            the target for DESTROY and IGNORED), or None for events on
            the whole table.
        level: INFO for changes, WARNING for ignored requests.

    """

    kind: EventKind
    message: str
    pid: int | None = None
    level: LogLevel = LogLevel.INFO

    def __str__(self) -> str:
        """Format as ``[LEVEL] kind: message``."""
        return f"[{self.level.name}] {self.kind}: {self.message}"


class Logger:
    """Append-only list of table events."""

    def __init__(self) -> None:
        """Create an empty log."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all events, oldest first."""
        return list(self._entries)

    def record(
        self,
        kind: EventKind,
        message: str,
        *,
        pid: int | None = None,
        level: LogLevel = LogLevel.INFO,
    ) -> LogEntry:
        """Append an event and return it."""
        entry = LogEntry(kind=kind, message=message, pid=pid, level=level)
        self._entries.append(entry)
        return entry

    def filter(
        self,
        *,
        kind: EventKind | None = None,
        pid: int | None = None,
        min_level: LogLevel | None = None,
    ) -> list[LogEntry]:
        """Return the events matching every given criterion, oldest first."""
        return [
            e
            for e in self._entries
            if (kind is None or e.kind is kind)
            and (pid is None or e.pid == pid)
            and (min_level is None or e.level >= min_level)
        ]

    def clear(self) -> None:
        """Forget every event."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of events."""
        return len(self._entries)
