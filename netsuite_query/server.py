"""
MCP server factory and stdio entry point.

Run with ``python -m netsuite_query.server``.
"""

import logging
from typing import Optional

from fastmcp import FastMCP

from netsuite_query.config import Settings, configure_logging
from netsuite_query.orchestrator import QueryOrchestrator
from netsuite_query.tools.catalog import register_catalog

logger = logging.getLogger(__name__)

SERVER_NAME = "netsuite-mcp-server"
SERVER_VERSION = "1.0.0"
INSTRUCTIONS = (
    "Read-only access to NetSuite accounting data. List tools accept CountOnly, "
    "OrderBy, Filters, Limit and Offset; dates are ISO-8601."
)


def create_server(
    orchestrator: Optional[QueryOrchestrator] = None,
    settings: Optional[Settings] = None,
) -> FastMCP:
    """
    Build the MCP server with every tool registered.

    Args:
        orchestrator: Orchestrator running the queries; built from
            ``settings`` when omitted
        settings: Gateway settings; read from the environment when omitted

    Returns:
        Configured FastMCP server
    """
    settings = settings or Settings.from_env()
    orchestrator = orchestrator or QueryOrchestrator.from_settings(settings)

    mcp = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS)
    register_catalog(mcp, orchestrator, settings)
    return mcp


def main() -> None:
    """Serve over stdio."""
    settings = Settings.from_env()
    configure_logging(settings)
    logger.info("Starting %s %s on stdio", SERVER_NAME, SERVER_VERSION)
    create_server(settings=settings).run(transport="stdio")


if __name__ == "__main__":
    main()
