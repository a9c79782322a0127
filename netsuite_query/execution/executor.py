"""
Query execution coordinator.

Drives a SuiteQL executor page by page until the backend reports no
more data.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping

from netsuite_query.core.errors import PagingLimitExceeded
from netsuite_query.core.interfaces import ISuiteQLExecutor
from netsuite_query.execution.result_formatter import ResultFormatter

logger = logging.getLogger(__name__)

DEFAULT_PAGE_DELAY = 0.1
DEFAULT_MAX_PAGES = 1000


class QueryExecutor:
    """
    Coordinates paged SuiteQL execution.

    Pages are fetched strictly one after another: the next offset is
    only known once the previous page has arrived.
    """

    def __init__(
        self,
        executor: ISuiteQLExecutor,
        page_delay: float = DEFAULT_PAGE_DELAY,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        """
        Initialize query executor.

        Args:
            executor: SuiteQL executor implementation
            page_delay: Seconds to wait between page requests
            max_pages: Page requests allowed before giving up
        """
        self.executor = executor
        self.page_delay = page_delay
        self.max_pages = max_pages

    async def fetch_all(
        self,
        statement: str,
        columns: Mapping[str, Any],
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Fetch and normalize every page of a statement.

        Args:
            statement: Compiled SuiteQL statement
            columns: Output columns used to normalize rows
            offset: Offset of the first request

        Returns:
            Normalized records of all pages, in backend order

        Raises:
            PagingLimitExceeded: If the backend still reports more data
                after ``max_pages`` requests
        """
        records: List[Dict[str, Any]] = []
        pages = 0

        while True:
            if pages >= self.max_pages:
                raise PagingLimitExceeded(self.max_pages)
            if pages > 0 and self.page_delay > 0:
                await asyncio.sleep(self.page_delay)

            page = await self.executor.execute(statement, offset)
            pages += 1
            records.extend(ResultFormatter.normalize_rows(page.items, columns))
            logger.debug(
                "Fetched page %d at offset %d: %d rows, has_more=%s",
                pages, offset, len(page.items), page.has_more,
            )

            if not page.has_more:
                break
            offset = page.offset + (page.count or len(page.items))

        logger.info("Fetched %d records in %d pages", len(records), pages)
        return records

    async def fetch_count(self, statement: str) -> int:
        """
        Run a count statement and return the count.

        The count is read from the ``count`` column of the single result
        row, falling back to the backend's total.
        """
        page = await self.executor.execute(statement, 0)
        if page.items:
            row = {str(k).lower(): v for k, v in page.items[0].items()}
            if row.get("count") is not None:
                return int(float(row["count"]))
        return page.total_count
