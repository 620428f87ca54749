"""Ring buffer storage adapter for archived command output.

Provides bounded in-memory storage that evicts the oldest inserted entry
when the buffer is full, so memory use stays predictable no matter how much
output the wrapped commands produce. Entries live for the lifetime of the
process only.
"""

import itertools
import logging
from collections import OrderedDict
from collections.abc import AsyncIterable, Callable
from datetime import UTC, datetime

from nixmcp.core.models import CommandResult, LogEntry

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with millisecond resolution."""
    now = datetime.now(UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RingBufferLogStorage:
    """Ring buffer implementation of LogStoragePort.

    Stores entries keyed by identifier in insertion order. When the buffer
    is full, the oldest inserted entry is evicted to make room for the new
    one. Lookups do not affect eviction order (FIFO, not LRU).

    Identifiers come from a counter owned by this instance, so an evicted
    identifier is never handed out again and a lookup for it fails instead
    of aliasing a newer entry.

    All access is expected from a single event loop; no locking is done.

    Args:
        max_size: Maximum number of entries to store.
        clock: Callable returning the timestamp string for new entries.
    """

    def __init__(
        self,
        max_size: int,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, LogEntry] = OrderedDict()
        self._ids = itertools.count(1)

    @property
    def max_size(self) -> int:
        return self._max_size

    async def write(self, command: str, result: CommandResult) -> str:
        """Archive a command result and return its identifier."""
        log_id = f"log-{next(self._ids)}"
        if len(self._entries) >= self._max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted %s to make room for %s", evicted, log_id)
        self._entries[log_id] = LogEntry(
            id=log_id,
            command=command,
            timestamp=self._clock(),
            stdout=result.stdout,
            stderr=result.stderr,
            exit_code=result.exit_code,
        )
        return log_id

    async def get(self, log_id: str) -> LogEntry | None:
        """Return the entry stored under exactly this identifier."""
        return self._entries.get(log_id)

    async def read_recent(self, limit: int = 20) -> AsyncIterable[LogEntry]:
        """Read up to ``limit`` entries, most recent timestamp first.

        Timestamps only have millisecond resolution, so entries written in
        the same millisecond compare equal; those keep their insertion order
        relative to each other (oldest first) rather than true recency.
        """
        ordered = sorted(
            self._entries.values(), key=lambda e: e.timestamp, reverse=True
        )
        for entry in ordered[:limit]:
            yield entry

    async def count(self) -> int:
        """Return the number of entries currently held."""
        return len(self._entries)
