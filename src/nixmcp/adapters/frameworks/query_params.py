"""Shared query parameter parsing utilities for the HTTP adapter.

Parameters arrive as parsed by urllib.parse.parse_qs: each name maps to a
list of raw string values, of which only the first is used.
"""


def _first(params: dict[str, list[str]], name: str) -> str | None:
    values = params.get(name)
    return values[0] if values else None


def _parse_count_param(params: dict[str, list[str]], name: str) -> int | None:
    """Parse a non-negative line count such as ``head`` or ``tail``.

    Returns:
        The count, or None if missing, non-numeric or negative.
    """
    raw = _first(params, name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


def _parse_limit_param(params: dict[str, list[str]], default: int) -> int:
    """Parse the ``limit`` parameter, falling back to ``default``."""
    value = _parse_count_param(params, "limit")
    return default if value is None else value


def _parse_grep_param(params: dict[str, list[str]]) -> str | None:
    """Return the raw ``grep`` pattern; compilation happens on retrieval."""
    return _first(params, "grep") or None
