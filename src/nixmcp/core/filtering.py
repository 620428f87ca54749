"""Noise filtering for nix stderr output.

nix writes progress bars, download counters and experimental-feature
warnings to stderr. Those lines are useless in an inline view and are
dropped before display; the archived copy keeps them.
"""

import re
from collections.abc import Iterable

_COPYING_PATH = re.compile(r"^copying path")
_DOWNLOAD_PROGRESS = re.compile(r"^\s*\d+(\.\d+)?\s*(KiB|MiB|GiB)")


def is_noise_line(line: str) -> bool:
    """Return True if a stderr line should be hidden from the display."""
    if "Warning" in line and "experimental" in line:
        return True
    # Progress bar redraws
    if "\x1b[" in line or "\r" in line:
        return True
    if _COPYING_PATH.match(line):
        return True
    return bool(_DOWNLOAD_PROGRESS.match(line))


def drop_noise_lines(lines: Iterable[str]) -> list[str]:
    """Return the lines that are not noise, in their original order."""
    return [line for line in lines if not is_noise_line(line)]


def filter_noise(stderr: str) -> str:
    """Drop noise lines from stderr, keeping the rest in order.

    Args:
        stderr: Raw standard error text.

    Returns:
        Surviving lines joined by newlines, with surrounding whitespace
        stripped. Empty string if nothing survives.
    """
    return "\n".join(drop_noise_lines(stderr.split("\n"))).strip()
