"""Port interfaces for the log store and the process runner.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import AsyncIterable, Sequence
from typing import Protocol, runtime_checkable

from nixmcp.core.models import CommandResult, LogEntry


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for archived command output.

    Adapters implementing this protocol hold a bounded number of entries and
    hand out identifiers that are never reused.
    Examples: RingBufferLogStorage.
    """

    async def write(self, command: str, result: CommandResult) -> str:
        """Archive a command result and return its new identifier."""
        ...

    async def get(self, log_id: str) -> LogEntry | None:
        """Return the entry with exactly this identifier, or None."""
        ...

    def read_recent(self, limit: int = 20) -> AsyncIterable[LogEntry]:
        """Read the most recent entries.

        Args:
            limit: Maximum number of entries to yield.

        Returns:
            AsyncIterable of LogEntry objects, ordered by timestamp descending.
        """
        ...

    async def count(self) -> int:
        """Return the number of entries currently held."""
        ...


@runtime_checkable
class CommandRunnerPort(Protocol):
    """Port for running an external command to completion."""

    async def run(self, args: Sequence[str], cwd: str | None = None) -> CommandResult:
        """Run the command with the given arguments and collect its output.

        Spawn failures are reported as a failed CommandResult, never raised.
        """
        ...

    def render(self, args: Sequence[str]) -> str:
        """Render the full command line for display."""
        ...
