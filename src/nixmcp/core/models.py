"""Core domain models for command output."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one external command execution.

    Attributes:
        stdout: Everything the process wrote to standard output.
        stderr: Everything the process wrote to standard error.
        exit_code: Process exit status; 0 denotes success.
    """

    stdout: str
    stderr: str
    exit_code: int

    @property
    def combined(self) -> str:
        """Unfiltered stdout followed by stderr, with no separator."""
        return self.stdout + self.stderr


@dataclass(frozen=True)
class LogEntry:
    """An archived command execution.

    Attributes:
        id: Store-unique identifier (e.g. "log-7"), never reused.
        command: The rendered command line, for display only.
        timestamp: UTC ISO-8601 creation time with millisecond resolution.
        stdout: Full, unfiltered standard output.
        stderr: Full, unfiltered standard error.
        exit_code: Process exit status.
    """

    id: str
    command: str
    timestamp: str
    stdout: str
    stderr: str
    exit_code: int

    @property
    def text(self) -> str:
        """Full archived text as served by log retrieval."""
        return self.stdout + "\n" + self.stderr
