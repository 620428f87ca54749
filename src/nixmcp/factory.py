"""Wiring of the long-lived objects shared by every transport."""

from nixmcp.adapters.process import AsyncProcessRunner
from nixmcp.adapters.storage.ring_buffer import RingBufferLogStorage
from nixmcp.config import ServerSettings
from nixmcp.core.dispatch import OperationDispatcher
from nixmcp.core.formatting import OutputFormatter


def create_dispatcher(settings: ServerSettings) -> OperationDispatcher:
    """Build a dispatcher owning one log store for the process lifetime."""
    storage = RingBufferLogStorage(max_size=settings.limits.max_logs)
    return OperationDispatcher(
        runner=AsyncProcessRunner(settings.nix_executable),
        storage=storage,
        formatter=OutputFormatter(storage, settings.limits),
        list_limit=settings.list_limit,
    )
