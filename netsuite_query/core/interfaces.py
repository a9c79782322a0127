"""
Abstract interfaces for backend executors.

These protocols define the contract the orchestrator relies on. The
httpx adapters implement them for NetSuite; tests substitute stubs.
"""

from typing import Protocol

from netsuite_query.core.models import SearchDescriptor, SearchResponse, SuiteQLPage


class ISuiteQLExecutor(Protocol):
    """
    Execute a SuiteQL statement and return one page of rows.

    The orchestrator treats this as a paging oracle: it only reads the
    rows, the ``has_more`` flag and the ``offset``/``count`` pair.
    """

    async def execute(self, statement: str, offset: int = 0) -> SuiteQLPage:
        """
        Execute a statement starting at ``offset``.

        Args:
            statement: Compiled SuiteQL statement
            offset: Index of the first row to return

        Returns:
            SuiteQLPage with the rows of this page
        """
        ...


class ISearchExecutor(Protocol):
    """
    Run a saved-search descriptor through the search RESTlet.
    """

    async def search(self, descriptor: SearchDescriptor) -> SearchResponse:
        """
        Run a search.

        Args:
            descriptor: Compiled search descriptor

        Returns:
            SearchResponse envelope; ``success`` is False when the
            backend rejected the search
        """
        ...
