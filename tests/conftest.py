"""Shared test fixtures for all test modules."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from nixmcp.adapters.storage.ring_buffer import RingBufferLogStorage
from nixmcp.config import OutputLimits
from nixmcp.core.dispatch import OperationDispatcher
from nixmcp.core.formatting import OutputFormatter
from nixmcp.core.models import CommandResult

try:
    import httpx
except ImportError:
    httpx = None


@dataclass
class FakeCommandRunner:
    """CommandRunnerPort double that records calls and returns a canned result."""

    result: CommandResult = field(
        default_factory=lambda: CommandResult(stdout="", stderr="", exit_code=0)
    )
    executable: str = "nix"
    calls: list[tuple[list[str], str | None]] = field(default_factory=list)

    def render(self, args: Sequence[str]) -> str:
        return " ".join([self.executable, *args])

    async def run(self, args: Sequence[str], cwd: str | None = None) -> CommandResult:
        self.calls.append((list(args), cwd))
        return self.result


@pytest.fixture
def limits() -> OutputLimits:
    """Default output limits: 100 logs, 50 lines, 4000 characters."""
    return OutputLimits()


@pytest.fixture
def log_storage(limits: OutputLimits) -> RingBufferLogStorage:
    """Fixture providing an empty log storage."""
    return RingBufferLogStorage(max_size=limits.max_logs)


@pytest.fixture
def formatter(log_storage: RingBufferLogStorage, limits: OutputLimits) -> OutputFormatter:
    return OutputFormatter(log_storage, limits)


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def dispatcher(
    fake_runner: FakeCommandRunner,
    log_storage: RingBufferLogStorage,
    formatter: OutputFormatter,
) -> OperationDispatcher:
    """Dispatcher wired to the fake runner and a fresh log storage."""
    return OperationDispatcher(
        runner=fake_runner, storage=log_storage, formatter=formatter
    )


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(dispatcher)
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
