"""Bounded rendering of command output.

The formatter turns a raw CommandResult into the text returned to the
caller. Output too large for inline display is archived in the log store
first, unfiltered and untruncated, and the display carries a footer naming
the archived entry.
"""

import logging

from nixmcp.config import OutputLimits
from nixmcp.core.filtering import filter_noise
from nixmcp.core.models import CommandResult
from nixmcp.core.operations import OperationName
from nixmcp.core.ports import LogStoragePort

logger = logging.getLogger(__name__)

EMPTY_OUTPUT_MESSAGE = "Command completed successfully"


def needs_archive(result: CommandResult, limits: OutputLimits) -> bool:
    """Decide whether the unfiltered output is too large to show inline."""
    full_output = result.combined
    return (
        len(full_output) > limits.max_output_chars
        or len(full_output.split("\n")) > limits.max_output_lines
    )


def truncate_lines(text: str, max_lines: int) -> str:
    """Keep the first and last ``max_lines // 2`` lines of long text.

    The omitted middle is replaced by a single marker line.
    """
    lines = text.split("\n")
    if len(lines) <= max_lines:
        return text
    keep = max_lines // 2
    removed = len(lines) - max_lines
    head = lines[:keep]
    tail = lines[len(lines) - keep :] if keep else []
    return "\n".join([*head, f"... ({removed} lines omitted) ...", *tail])


def truncate_chars(text: str, max_chars: int) -> str:
    """Keep the first and last ``max_chars // 2`` characters of long text."""
    if len(text) <= max_chars:
        return text
    keep = max_chars // 2
    removed = len(text) - max_chars
    tail = text[len(text) - keep :] if keep else ""
    return f"{text[:keep]}\n... ({removed} characters omitted) ...\n{tail}"


def build_footer(exit_code: int, log_id: str | None) -> str:
    """Build the trailing status annotation, or an empty string."""
    parts: list[str] = []
    if exit_code != 0:
        parts.append(f"Exit code: {exit_code}")
    if log_id is not None:
        parts.append(f'Full log: use {OperationName.GET_LOG} with id="{log_id}"')
    if not parts:
        return ""
    return "\n\n[" + " | ".join(parts) + "]"


def render_display(result: CommandResult) -> str:
    """Combine stdout with noise-filtered stderr."""
    output = result.stdout
    if result.stderr:
        filtered = filter_noise(result.stderr)
        if filtered:
            output += ("\n" if output else "") + filtered
    return output


class OutputFormatter:
    """Renders command results and archives the ones too large to show.

    Args:
        storage: Log store receiving archived results.
        limits: Line and character thresholds.
    """

    def __init__(self, storage: LogStoragePort, limits: OutputLimits) -> None:
        self._storage = storage
        self._limits = limits

    async def format(self, command: str, result: CommandResult) -> str:
        """Produce the display text for a finished command.

        Args:
            command: Rendered command line, stored with any archived entry.
            result: Captured output of the command.

        Returns:
            Filtered and truncated output, followed by a footer when the
            command failed or its output was archived. Never empty.
        """
        # Archive before filtering so the stored copy is the full original.
        log_id = None
        if needs_archive(result, self._limits):
            log_id = await self._storage.write(command, result)
            logger.debug("Archived output of %r as %s", command, log_id)

        output = render_display(result)
        output = truncate_lines(output, self._limits.max_output_lines)
        output = truncate_chars(output, self._limits.max_output_chars)
        output += build_footer(result.exit_code, log_id)

        return output or EMPTY_OUTPUT_MESSAGE
