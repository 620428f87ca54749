"""BDD step definitions for bounded output and log retrieval features."""

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from nixmcp.adapters.storage.ring_buffer import RingBufferLogStorage
from nixmcp.config import OutputLimits
from nixmcp.core.dispatch import OperationDispatcher, ToolResponse
from nixmcp.core.formatting import OutputFormatter
from nixmcp.core.models import CommandResult


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine from a synchronous step."""
    return asyncio.run(coro)


def numbered(count: int) -> list[str]:
    return [f"line {i}" for i in range(1, count + 1)]


@dataclass
class RetrievalScenarioContext:
    """State shared between the steps of one scenario."""

    runner: Any
    limits: OutputLimits = field(default_factory=OutputLimits)
    storage: RingBufferLogStorage = field(init=False)
    dispatcher: OperationDispatcher = field(init=False)
    response: ToolResponse | None = None

    def __post_init__(self) -> None:
        self.rebuild(self.limits)

    def rebuild(self, limits: OutputLimits) -> None:
        self.limits = limits
        self.storage = RingBufferLogStorage(max_size=limits.max_logs)
        self.dispatcher = OperationDispatcher(
            runner=self.runner,
            storage=self.storage,
            formatter=OutputFormatter(self.storage, limits),
        )

    @property
    def text(self) -> str:
        assert self.response is not None
        return self.response.text


@pytest.fixture
def ctx(fake_runner) -> RetrievalScenarioContext:
    """Fresh scenario context for each test."""
    return RetrievalScenarioContext(runner=fake_runner)


@given(parsers.parse("nix prints {count:d} lines on {stream} and exits with code {code:d}"))
def given_nix_output(
    ctx: RetrievalScenarioContext, count: int, stream: str, code: int
) -> None:
    text = "\n".join(numbered(count))
    if stream == "stdout":
        ctx.runner.result = CommandResult(stdout=text, stderr="", exit_code=code)
    else:
        ctx.runner.result = CommandResult(stdout="", stderr=text, exit_code=code)


@given(parsers.parse("the log store holds at most {size:d} entries"))
def given_store_capacity(ctx: RetrievalScenarioContext, size: int) -> None:
    ctx.rebuild(OutputLimits(max_logs=size))


@given(parsers.parse("{count:d} commands have produced archived output"))
def given_archived_commands(ctx: RetrievalScenarioContext, count: int) -> None:
    ctx.runner.result = CommandResult(
        stdout="\n".join(numbered(80)), stderr="", exit_code=0
    )
    for _ in range(count):
        run_async(ctx.dispatcher.call("build", {}))


@given(parsers.parse('the "{name}" operation was called'))
@when(parsers.parse('the "{name}" operation is called'))
def when_operation_called(ctx: RetrievalScenarioContext, name: str) -> None:
    ctx.response = run_async(ctx.dispatcher.call(name, {}))


@when(parsers.parse('log "{log_id}" is retrieved'))
def when_log_retrieved(ctx: RetrievalScenarioContext, log_id: str) -> None:
    ctx.response = run_async(ctx.dispatcher.call("get_log", {"log_id": log_id}))


@when(parsers.parse('log "{log_id}" is retrieved with grep "{pattern}"'))
def when_log_retrieved_with_grep(
    ctx: RetrievalScenarioContext, log_id: str, pattern: str
) -> None:
    arguments = {"log_id": log_id, "grep": pattern}
    ctx.response = run_async(ctx.dispatcher.call("get_log", arguments))


@then("the response is exactly the output")
def then_response_is_output(ctx: RetrievalScenarioContext) -> None:
    assert ctx.text == ctx.runner.result.stdout


@then(parsers.parse('the response is "{expected}"'))
def then_response_is(ctx: RetrievalScenarioContext, expected: str) -> None:
    assert ctx.text == expected


@then(parsers.parse("{count:d} logs are archived"))
def then_logs_archived(ctx: RetrievalScenarioContext, count: int) -> None:
    assert run_async(ctx.storage.count()) == count


@then(parsers.parse("the response keeps lines {a:d} to {b:d} and {c:d} to {d:d}"))
def then_response_keeps_lines(
    ctx: RetrievalScenarioContext, a: int, b: int, c: int, d: int
) -> None:
    lines = ctx.text.split("\n")
    assert lines[: b - a + 1] == [f"line {i}" for i in range(a, b + 1)]
    tail = [f"line {i}" for i in range(c, d + 1)]
    start = b - a + 2
    assert lines[start : start + len(tail)] == tail
    assert f"line {b + 1}" not in lines


@then(parsers.parse('the response has the marker "{marker}"'))
def then_response_has_marker(ctx: RetrievalScenarioContext, marker: str) -> None:
    assert marker in ctx.text.split("\n")


@then(parsers.parse("the response ends with '{suffix}'"))
def then_response_ends_with(ctx: RetrievalScenarioContext, suffix: str) -> None:
    assert ctx.text.endswith("\n\n" + suffix)


@then(parsers.parse('the response starts with "{prefix}"'))
def then_response_starts_with(ctx: RetrievalScenarioContext, prefix: str) -> None:
    assert ctx.text.startswith(prefix)


@then(parsers.parse("the response contains all {count:d} lines"))
def then_response_contains_all(ctx: RetrievalScenarioContext, count: int) -> None:
    lines = ctx.text.split("\n")
    assert all(line in lines for line in numbered(count))


@then(parsers.parse('the log "{log_id}" is reported as not found'))
def then_log_not_found(ctx: RetrievalScenarioContext, log_id: str) -> None:
    assert ctx.text == (
        f"Log not found: {log_id}\nUse list_logs to see available logs."
    )


@then("the response is not an error")
def then_not_error(ctx: RetrievalScenarioContext) -> None:
    assert ctx.response is not None
    assert not ctx.response.is_error


@then("the response is an error")
def then_error(ctx: RetrievalScenarioContext) -> None:
    assert ctx.response is not None
    assert ctx.response.is_error
