"""Process runner adapter built on asyncio subprocesses."""

import asyncio
import logging
from collections.abc import Sequence

from nixmcp.core.models import CommandResult

logger = logging.getLogger(__name__)

SPAWN_FAILURE_EXIT_CODE = 1


def _normalize_exit_code(returncode: int | None) -> int:
    # A signal-terminated child reports a negative code; treat it as unknown.
    if returncode is None or returncode < 0:
        return SPAWN_FAILURE_EXIT_CODE
    return returncode


class AsyncProcessRunner:
    """Implementation of CommandRunnerPort that spawns a child process.

    The child inherits the current environment. Its stdout and stderr are
    collected independently until it exits; there is no timeout and no
    cancellation of the child.

    Args:
        executable: Program to run; arguments are appended per call.
    """

    def __init__(self, executable: str = "nix") -> None:
        self.executable = executable

    def render(self, args: Sequence[str]) -> str:
        """Render the full command line for display."""
        return " ".join([self.executable, *args])

    async def run(self, args: Sequence[str], cwd: str | None = None) -> CommandResult:
        """Run the executable with ``args`` and collect its output.

        Failures to start the process (missing executable, permission
        denied, missing working directory) are returned as a result with
        exit code 1 and the OS error message on stderr.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.warning("Failed to start %s: %s", self.executable, exc)
            return CommandResult(
                stdout="", stderr=str(exc), exit_code=SPAWN_FAILURE_EXIT_CODE
            )

        stdout, stderr = await process.communicate()
        return CommandResult(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=_normalize_exit_code(process.returncode),
        )
