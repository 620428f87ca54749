"""ASGI generic adapter exposing the operation dispatcher over HTTP.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne):

    uvicorn --factory nixmcp.adapters.frameworks.asgi:create_default_app

Endpoints:
    GET  /tools              - JSON list of operations and input schemas
    POST /tools/<name>       - run an operation; JSON object body as arguments
    GET  /logs?limit=<n>     - NDJSON summaries of recent archived output
    GET  /logs/<id>          - archived output (?grep=, ?head=, ?tail=)
"""

import json
import logging
from collections.abc import Callable, Coroutine
from dataclasses import asdict
from typing import Any
from urllib.parse import parse_qs

from nixmcp.adapters.frameworks.query_params import (
    _parse_count_param,
    _parse_grep_param,
    _parse_limit_param,
)
from nixmcp.config import load_settings
from nixmcp.core.dispatch import OperationDispatcher, ToolResponse
from nixmcp.core.encoding.ndjson import encode_log_summaries
from nixmcp.core.operations import OperationName, get_operation
from nixmcp.factory import create_dispatcher

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

TEXT = "text/plain; charset=utf-8"


def _parse_query_params(scope: Scope) -> dict[str, list[str]]:
    """Parse query string from ASGI scope into parameter dictionary.

    Returns empty dict if query_string is missing or empty.
    """
    query_string = scope.get("query_string", b"").decode(errors="replace")
    return parse_qs(query_string)


async def _read_body(receive: Receive) -> bytes:
    """Read the full request body, which may arrive in several messages."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _send_tool_response(send: Send, response: ToolResponse) -> None:
    status = 400 if response.is_error else 200
    await _send_response(send, status, TEXT, response.text)


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], Coroutine[Any, Any, str]],
    content_type: str,
    log_message: str,
) -> None:
    """Execute an endpoint function with error handling and send response.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Async function that returns response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = await endpoint_func()
        await _send_response(send, 200, content_type, body)
    except Exception:
        logger.exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)


def create_asgi_app(dispatcher: OperationDispatcher, list_limit: int = 20) -> ASGIApp:
    """Create an ASGI app serving operations and archived logs.

    Args:
        dispatcher: Dispatcher whose operations and log store are exposed.
        list_limit: Default number of entries served by ``GET /logs``.

    Returns:
        ASGI application callable.
    """

    async def list_tools() -> str:
        return json.dumps([asdict(tool) for tool in dispatcher.list_tools()])

    async def call_tool(name: str, receive: Receive, send: Send) -> None:
        if get_operation(name) is None:
            await _send_response(send, 404, TEXT, f"Error: Unknown tool: {name}")
            return
        raw = await _read_body(receive)
        try:
            arguments = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            await _send_response(send, 400, TEXT, f"Error: Invalid JSON body: {exc}")
            return
        if not isinstance(arguments, dict):
            await _send_response(send, 400, TEXT, "Error: Body must be a JSON object")
            return
        await _send_tool_response(send, await dispatcher.call(name, arguments))

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        method = scope["method"]
        path = scope["path"]
        params = _parse_query_params(scope)

        if path == "/tools" and method == "GET":
            await _handle_endpoint(
                send, list_tools, "application/json", "Error listing tools"
            )
        elif path.startswith("/tools/") and method == "POST":
            await call_tool(path.removeprefix("/tools/"), receive, send)
        elif path == "/logs" and method == "GET":
            limit = _parse_limit_param(params, list_limit)

            async def recent() -> str:
                entries = [e async for e in dispatcher.storage.read_recent(limit)]
                return encode_log_summaries(entries)

            await _handle_endpoint(
                send, recent, "application/x-ndjson", "Error encoding logs endpoint"
            )
        elif path.startswith("/logs/") and method == "GET":
            arguments: dict[str, Any] = {"log_id": path.removeprefix("/logs/")}
            grep = _parse_grep_param(params)
            head = _parse_count_param(params, "head")
            tail = _parse_count_param(params, "tail")
            if grep is not None:
                arguments["grep"] = grep
            if head is not None:
                arguments["head"] = head
            if tail is not None:
                arguments["tail"] = tail
            response = await dispatcher.call(OperationName.GET_LOG, arguments)
            await _send_tool_response(send, response)
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app


def create_default_app() -> ASGIApp:
    """Build an app from environment-configured settings."""
    settings = load_settings([])
    return create_asgi_app(create_dispatcher(settings), settings.list_limit)
