"""Configuration module: frozen dataclasses loaded from environment variables.

Command-line flags override environment variables, which override the
dataclass defaults.
"""

import argparse
import os
from collections.abc import Sequence
from dataclasses import dataclass, field

DEFAULT_MAX_LOGS = 100
DEFAULT_MAX_OUTPUT_LINES = 50
DEFAULT_MAX_OUTPUT_CHARS = 4000
DEFAULT_LIST_LIMIT = 20
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class OutputLimits:
    """Bounds shared by the log store and the output formatter.

    Attributes:
        max_logs: Capacity of the log store.
        max_output_lines: Line threshold for archiving and truncation.
        max_output_chars: Character threshold for archiving and truncation.
    """

    max_logs: int = DEFAULT_MAX_LOGS
    max_output_lines: int = DEFAULT_MAX_OUTPUT_LINES
    max_output_chars: int = DEFAULT_MAX_OUTPUT_CHARS

    def __post_init__(self) -> None:
        for name in ("max_logs", "max_output_lines", "max_output_chars"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be a positive integer")


@dataclass(frozen=True)
class ServerSettings:
    limits: OutputLimits = field(default_factory=OutputLimits)
    nix_executable: str = "nix"
    list_limit: int = DEFAULT_LIST_LIMIT
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="nix-mcp",
        description="Serve nix commands as tools over MCP stdio.",
    )
    parser.add_argument(
        "--max-logs",
        type=int,
        default=None,
        help=f"Number of archived logs to keep (default: {DEFAULT_MAX_LOGS})",
    )
    parser.add_argument(
        "--max-output-lines",
        type=int,
        default=None,
        help=f"Lines shown before truncating (default: {DEFAULT_MAX_OUTPUT_LINES})",
    )
    parser.add_argument(
        "--max-output-chars",
        type=int,
        default=None,
        help=f"Characters shown before truncating (default: {DEFAULT_MAX_OUTPUT_CHARS})",
    )
    parser.add_argument(
        "--nix",
        dest="nix_executable",
        default=None,
        help="nix executable to invoke (default: nix)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Diagnostic log level, written to stderr (default: INFO)",
    )
    return parser


def load_settings(argv: Sequence[str] | None = None) -> ServerSettings:
    """Build ServerSettings from env vars, then override with CLI args."""
    env_max_logs = _env_int("NIX_MCP_MAX_LOGS", DEFAULT_MAX_LOGS)
    env_max_lines = _env_int("NIX_MCP_MAX_OUTPUT_LINES", DEFAULT_MAX_OUTPUT_LINES)
    env_max_chars = _env_int("NIX_MCP_MAX_OUTPUT_CHARS", DEFAULT_MAX_OUTPUT_CHARS)
    env_executable = os.environ.get("NIX_MCP_EXECUTABLE", ServerSettings.nix_executable)
    env_log_level = os.environ.get("NIX_MCP_LOG_LEVEL", ServerSettings.log_level)
    if env_log_level.upper() not in LOG_LEVELS:
        raise ValueError(
            f"NIX_MCP_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, "
            f"got {env_log_level!r}"
        )

    args = build_parser().parse_args(argv)

    limits = OutputLimits(
        max_logs=args.max_logs if args.max_logs is not None else env_max_logs,
        max_output_lines=(
            args.max_output_lines
            if args.max_output_lines is not None
            else env_max_lines
        ),
        max_output_chars=(
            args.max_output_chars
            if args.max_output_chars is not None
            else env_max_chars
        ),
    )
    return ServerSettings(
        limits=limits,
        nix_executable=args.nix_executable or env_executable,
        log_level=(args.log_level or env_log_level).upper(),
    )
