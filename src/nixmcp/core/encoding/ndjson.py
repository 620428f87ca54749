"""NDJSON encoder for archived log summaries."""

import json
from collections.abc import Iterable

from nixmcp.core.models import LogEntry


def _line_count(text: str) -> int:
    return len(text.splitlines())


def encode_log_summaries(entries: Iterable[LogEntry]) -> str:
    """Encode archived entries to newline-delimited JSON.

    Full output is left out; each object carries line counts so a client
    can decide how much to fetch.

    Args:
        entries: An iterable of LogEntry objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no entries.
    """
    lines = []
    for entry in entries:
        obj = {
            "id": entry.id,
            "command": entry.command,
            "timestamp": entry.timestamp,
            "exit_code": entry.exit_code,
            "stdout_lines": _line_count(entry.stdout),
            "stderr_lines": _line_count(entry.stderr),
        }
        lines.append(json.dumps(obj))

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
