from __future__ import annotations

import asyncio
import logging
import sys

from erold_mcp.core.config import log_level_from_env, validate_config
from erold_mcp.core.logging import setup_logging
from erold_mcp.server import create_server

log = logging.getLogger("erold_mcp.transports.stdio")


async def main() -> None:
    app = create_server()
    await app.run_stdio_async()


def run() -> None:
    """Console-script entry point."""
    # Exits with status 1 when the API key or tenant is missing
    config = validate_config(use_dotenv=True)
    setup_logging(log_level_from_env())
    log.info("Starting Erold MCP server for tenant %s", config.tenant)

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        log.error("Failed to start MCP server: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    run()
