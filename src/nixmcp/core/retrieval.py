"""Query functions over archived command output."""

import re

from nixmcp.core.errors import InvalidFilterPatternError
from nixmcp.core.models import LogEntry
from nixmcp.core.operations import OperationName
from nixmcp.core.ports import LogStoragePort

NO_LOGS_MESSAGE = "No logs available."
COMMAND_PREVIEW_CHARS = 50


def not_found_message(log_id: str) -> str:
    return (
        f"Log not found: {log_id}\n"
        f"Use {OperationName.LIST_LOGS} to see available logs."
    )


def compile_grep(pattern: str) -> re.Pattern[str]:
    """Compile a case-insensitive grep pattern.

    Raises:
        InvalidFilterPatternError: If the pattern is not a valid regex.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise InvalidFilterPatternError(pattern, str(exc)) from exc


def select_lines(
    text: str,
    grep: str | None = None,
    head: int | None = None,
    tail: int | None = None,
) -> list[str]:
    """Filter and window the lines of archived text.

    ``grep`` is applied first, then ``head``, then ``tail`` on what ``head``
    left. A ``head`` or ``tail`` of zero (or None) is not applied.
    """
    lines = text.split("\n")
    if grep:
        pattern = compile_grep(grep)
        lines = [line for line in lines if pattern.search(line)]
    if head:
        lines = lines[:head]
    if tail:
        lines = lines[-tail:]
    return lines


def render_entry(
    entry: LogEntry,
    grep: str | None = None,
    head: int | None = None,
    tail: int | None = None,
) -> str:
    """Render an archived entry with its header and selected body lines."""
    body = select_lines(entry.text, grep=grep, head=head, tail=tail)
    return "\n".join(
        [
            f"Command: {entry.command}",
            f"Exit code: {entry.exit_code}",
            f"Timestamp: {entry.timestamp}",
            "",
            "\n".join(body),
        ]
    )


def render_summary(entry: LogEntry) -> str:
    """Render one line of the recent-logs listing."""
    command = entry.command[:COMMAND_PREVIEW_CHARS]
    if len(entry.command) > COMMAND_PREVIEW_CHARS:
        command += "..."
    return f"[{entry.id}] {entry.timestamp} - {command} (exit: {entry.exit_code})"


async def fetch_log(
    storage: LogStoragePort,
    log_id: str,
    grep: str | None = None,
    head: int | None = None,
    tail: int | None = None,
) -> str:
    """Fetch an archived entry by identifier.

    Args:
        storage: Log store to query.
        log_id: Exact identifier from a footer or listing.
        grep: Case-insensitive regex; only matching lines are kept.
        head: Keep only the first N lines.
        tail: Keep only the last N lines of what remains after ``head``.

    Returns:
        Header plus selected lines, or a guidance message pointing at the
        listing operation when the identifier is unknown or evicted.

    Raises:
        InvalidFilterPatternError: If ``grep`` does not compile.
    """
    entry = await storage.get(log_id)
    if entry is None:
        return not_found_message(log_id)
    return render_entry(entry, grep=grep, head=head, tail=tail)


async def list_logs(storage: LogStoragePort, limit: int = 20) -> str:
    """List the most recent archived entries, one per line."""
    lines = [render_summary(entry) async for entry in storage.read_recent(limit)]
    if not lines:
        return NO_LOGS_MESSAGE
    return "\n".join(lines)
