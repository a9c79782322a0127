"""
NetSuite Query - generic query gateway for NetSuite.

Compiles a generic query envelope into SuiteQL statements or saved-search
descriptors, executes them and exposes the results as MCP tools.
"""

from netsuite_query.config import Settings
from netsuite_query.orchestrator import QueryOrchestrator

__all__ = ["QueryOrchestrator", "Settings"]
