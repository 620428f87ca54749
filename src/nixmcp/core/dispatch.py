"""Operation dispatch and the caller-facing error boundary."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from nixmcp.core.errors import NixMCPError, UnknownOperationError
from nixmcp.core.formatting import OutputFormatter
from nixmcp.core.operations import (
    OPERATIONS,
    CommandArgs,
    GetLogArgs,
    ListLogsArgs,
    get_operation,
)
from nixmcp.core.ports import CommandRunnerPort, LogStoragePort
from nixmcp.core.retrieval import fetch_log, list_logs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResponse:
    """Text returned to a caller, flagged when it reports an error."""

    text: str
    is_error: bool = False


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: dict[str, Any]


class OperationDispatcher:
    """Routes named operations to nix invocations or the log store.

    Args:
        runner: Runs nix and collects its output.
        storage: Log store shared by the formatter and retrieval operations.
        formatter: Renders command results, archiving large ones in storage.
        list_limit: Maximum number of entries shown by the listing operation.
    """

    def __init__(
        self,
        runner: CommandRunnerPort,
        storage: LogStoragePort,
        formatter: OutputFormatter,
        list_limit: int = 20,
    ) -> None:
        self.runner = runner
        self.storage = storage
        self.formatter = formatter
        self.list_limit = list_limit
        self._running: set[asyncio.Task[str]] = set()

    def list_tools(self) -> list[ToolDescriptor]:
        """Describe every operation with its input schema."""
        return [
            ToolDescriptor(
                name=str(op.name),
                description=op.description,
                input_schema=op.input_schema(),
            )
            for op in OPERATIONS.values()
        ]

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> str:
        """Run an operation and return its display text.

        Cancelling the caller does not interrupt a running nix command; it
        still completes and large output is still archived.

        Raises:
            UnknownOperationError: If no operation has this name.
            pydantic.ValidationError: If the arguments do not fit the operation.
            InvalidFilterPatternError: If a retrieval grep pattern is invalid.
        """
        operation = get_operation(name)
        if operation is None:
            raise UnknownOperationError(name)
        args = operation.parse(arguments)

        if isinstance(args, GetLogArgs):
            return await fetch_log(
                self.storage, args.log_id, grep=args.grep, head=args.head, tail=args.tail
            )
        if isinstance(args, ListLogsArgs):
            return await list_logs(self.storage, limit=self.list_limit)
        if not isinstance(args, CommandArgs):
            raise TypeError(f"No handler for arguments of type {type(args).__name__}")

        # A cancelled caller only loses the response; the command still
        # runs to completion and its output is archived.
        task = asyncio.ensure_future(self._run_command(args))
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        return await asyncio.shield(task)

    async def _run_command(self, args: CommandArgs) -> str:
        argv = args.to_argv()
        command = self.runner.render(argv)
        logger.debug("Running %s", command)
        result = await self.runner.run(argv, cwd=args.cwd)
        if result.exit_code != 0:
            logger.info("%s exited with code %d", command, result.exit_code)
        return await self.formatter.format(command, result)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> ToolResponse:
        """Run an operation, converting any failure into an error response."""
        try:
            text = await self.dispatch(name, arguments)
        except (NixMCPError, ValidationError) as exc:
            logger.info("Operation %s rejected: %s", name, exc)
            return ToolResponse(text=f"Error: {exc}", is_error=True)
        except Exception as exc:
            logger.exception("Operation %s failed", name)
            return ToolResponse(text=f"Error: {exc}", is_error=True)
        return ToolResponse(text=text)
