"""Kernel log buffer — an in-memory record of file-system events.

Every create, unlink, read and write that passes through the virtual
file system leaves a trace here, together with each system call the
kernel dispatches.  Think of it as ``dmesg`` for our tiny machine:
nothing is printed, the shell decides what (if anything) to show.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, fd).
- **Logger** — a bounded, append-only buffer with filtering.

The buffer is bounded because the simulation may run for a long time
in the REPL or behind the web UI; when full, the oldest entry is
dropped, the same way a kernel ring buffer overwrites old messages.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_CAPACITY = 1000


class LogLevel(IntEnum):
    """Severity levels for log entries.

    Using IntEnum means levels compare with ``<`` / ``>`` naturally,
    which makes minimum-level filtering trivial.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The subsystem that generated the event ("vfs", "syscall", "kernel").
        fd: The file descriptor involved, if any.

    """

    level: LogLevel
    message: str
    source: str
    fd: int | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message`` with an optional fd tag."""
        tag = f" (fd {self.fd})" if self.fd is not None else ""
        return f"[{self.level.name}] {self.source}: {self.message}{tag}"


class Logger:
    """Bounded log buffer with filtering.

    Entries are kept in chronological order.  Once ``capacity`` entries
    have been recorded, each new entry evicts the oldest one.
    """

    def __init__(self, *, capacity: int = DEFAULT_CAPACITY) -> None:
        """Create an empty logger.

        Args:
            capacity: Maximum number of entries retained.

        Raises:
            ValueError: If capacity is not positive.

        """
        if capacity < 1:
            msg = f"Log capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Return the maximum number of retained entries."""
        assert self._entries.maxlen is not None  # noqa: S101
        return self._entries.maxlen

    @property
    def entries(self) -> list[LogEntry]:
        """Return all retained entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        fd: int | None = None,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Subsystem that generated the event.
            fd: File descriptor associated with the event.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, fd=fd))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
        ]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
