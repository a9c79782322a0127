"""
FastAPI application for the NetSuite MCP server.

Serves a health check and mounts the MCP streamable-HTTP endpoint at /mcp.
"""

from fastapi import FastAPI

from netsuite_query.config import Settings, configure_logging
from netsuite_query.server import SERVER_NAME, SERVER_VERSION, create_server

settings = Settings.from_env()
configure_logging(settings)

mcp = create_server(settings=settings)
mcp_app = mcp.http_app(path="/mcp")

app = FastAPI(
    title="NetSuite MCP Server",
    description="Generic NetSuite query tools over the Model Context Protocol",
    version=SERVER_VERSION,
    lifespan=mcp_app.lifespan,
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "server": SERVER_NAME,
        "version": SERVER_VERSION,
        "tools": len(await mcp.get_tools()),
    }


app.mount("/", mcp_app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
