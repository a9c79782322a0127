"""NetSuite adapter for the query gateway."""

from netsuite_query.adapters.netsuite.executor import SearchRestletExecutor, SuiteQLExecutor

__all__ = ["SearchRestletExecutor", "SuiteQLExecutor"]
