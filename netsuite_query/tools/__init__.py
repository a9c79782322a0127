"""MCP tools exposed by the gateway."""

from netsuite_query.tools.catalog import build_catalog, register_catalog
from netsuite_query.tools.registry import ToolSpec, register_query_tool, run_query_tool, tool_error

__all__ = [
    "ToolSpec",
    "build_catalog",
    "register_catalog",
    "register_query_tool",
    "run_query_tool",
    "tool_error",
]
