"""nixmcp - nix commands as tools, with bounded and retrievable output.

Long command output is truncated for inline display and archived in a
bounded in-memory log store, from which callers fetch the full text later.
"""

from nixmcp.adapters.frameworks.asgi import create_asgi_app
from nixmcp.adapters.frameworks.mcp_stdio import create_mcp_server, serve_stdio
from nixmcp.adapters.process import AsyncProcessRunner
from nixmcp.adapters.storage.ring_buffer import RingBufferLogStorage
from nixmcp.config import OutputLimits, ServerSettings, load_settings
from nixmcp.core.dispatch import OperationDispatcher, ToolResponse
from nixmcp.core.formatting import OutputFormatter
from nixmcp.core.models import CommandResult, LogEntry
from nixmcp.core.operations import OperationName
from nixmcp.core.ports import CommandRunnerPort, LogStoragePort
from nixmcp.factory import create_dispatcher

__all__ = [
    "AsyncProcessRunner",
    "CommandResult",
    "CommandRunnerPort",
    "LogEntry",
    "LogStoragePort",
    "OperationDispatcher",
    "OperationName",
    "OutputFormatter",
    "OutputLimits",
    "RingBufferLogStorage",
    "ServerSettings",
    "ToolResponse",
    "create_asgi_app",
    "create_dispatcher",
    "create_mcp_server",
    "load_settings",
    "serve_stdio",
]
