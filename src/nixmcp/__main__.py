"""Command-line entry point: serve nix tools over MCP stdio."""

import asyncio
import logging
import sys
from collections.abc import Sequence

from nixmcp.adapters.frameworks.mcp_stdio import serve_stdio
from nixmcp.adapters.logging import configure_logging
from nixmcp.config import load_settings
from nixmcp.factory import create_dispatcher

logger = logging.getLogger("nixmcp")


def main(argv: Sequence[str] | None = None) -> int:
    try:
        settings = load_settings(argv)
    except ValueError as exc:
        print(f"nix-mcp: {exc}", file=sys.stderr)
        return 2
    configure_logging(settings.log_level)

    try:
        asyncio.run(serve_stdio(create_dispatcher(settings)))
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
