"""
Query orchestrator - main entry point.

Coordinates translation, execution and result formatting for both
NetSuite query paths.
"""

import logging
from typing import Any, Dict, List, Optional

from netsuite_query.config import Settings
from netsuite_query.core.interfaces import ISearchExecutor, ISuiteQLExecutor
from netsuite_query.core.models import (
    MAX_RESULTS,
    FilterExpression,
    QueryParams,
    SearchDescriptor,
    SearchSchema,
    SortSpec,
    SuiteQLSchema,
)
from netsuite_query.execution.executor import DEFAULT_MAX_PAGES, DEFAULT_PAGE_DELAY, QueryExecutor
from netsuite_query.execution.result_formatter import ResultFormatter
from netsuite_query.query.search import SearchTranslator
from netsuite_query.query.suiteql import SuiteQLTranslator
from netsuite_query.query.translator import enforce_result_ceiling

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """
    Main orchestrator for NetSuite queries.

    Every tool goes through one of two paths: a SuiteQL statement
    fetched page by page, or a saved-search descriptor posted to the
    search RESTlet in a single request.
    """

    def __init__(
        self,
        suiteql_executor: ISuiteQLExecutor,
        search_executor: ISearchExecutor,
        page_delay: float = DEFAULT_PAGE_DELAY,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        """
        Initialize query orchestrator with backend executors.

        Args:
            suiteql_executor: SuiteQL executor implementation
            search_executor: Search RESTlet executor implementation
            page_delay: Seconds to wait between SuiteQL pages
            max_pages: SuiteQL page requests allowed per query
        """
        self.suiteql_translator = SuiteQLTranslator()
        self.search_translator = SearchTranslator()
        self.search_executor = search_executor
        self.query_executor = QueryExecutor(
            suiteql_executor, page_delay=page_delay, max_pages=max_pages
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryOrchestrator":
        """
        Create orchestrator talking to NetSuite over HTTPS.

        Args:
            settings: Gateway settings

        Returns:
            Configured QueryOrchestrator
        """
        from netsuite_query.adapters.netsuite import SearchRestletExecutor, SuiteQLExecutor

        return cls(
            suiteql_executor=SuiteQLExecutor(settings),
            search_executor=SearchRestletExecutor(settings),
            page_delay=settings.page_delay,
            max_pages=settings.max_pages,
        )

    async def fetch_suiteql(
        self,
        template: str,
        schema: SuiteQLSchema,
        params: Optional[QueryParams] = None,
        inbuilt_filter: str = "",
        default_sort: Optional[SortSpec] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every normalized record of a SuiteQL query."""
        params = params or QueryParams()
        statement = self.suiteql_translator.translate(
            template, schema, params, inbuilt_filter, default_sort
        )
        return await self.query_executor.fetch_all(
            statement, schema.output_columns(), offset=params.offset or 0
        )

    async def run_suiteql(
        self,
        template: str,
        schema: SuiteQLSchema,
        params: QueryParams,
        inbuilt_filter: str = "",
        default_sort: Optional[SortSpec] = None,
    ) -> Dict[str, Any]:
        """
        Run a SuiteQL-backed list query.

        Args:
            template: Statement template of the tool
            schema: Column schema of the tool
            params: Generic query envelope
            inbuilt_filter: Condition always applied
            default_sort: Ordering used when the request names none

        Returns:
            ``{"Count": n}`` in count mode, ``{"items": [...]}`` otherwise
        """
        if params.count_only:
            statement = self.suiteql_translator.translate(
                template, schema, params, inbuilt_filter, default_sort
            )
            return ResultFormatter.format_count(await self.query_executor.fetch_count(statement))

        records = await self.fetch_suiteql(template, schema, params, inbuilt_filter, default_sort)
        return ResultFormatter.format_items(records)

    async def execute_search(self, descriptor: SearchDescriptor):
        """
        Send a descriptor after applying the result ceiling.

        An unset result cap becomes the ceiling itself.

        Raises:
            LimitExceeded: If the descriptor asks for more than the ceiling
        """
        descriptor.max_results = descriptor.max_results or MAX_RESULTS
        enforce_result_ceiling(descriptor.max_results)
        return await self.search_executor.search(descriptor)

    async def run_search(
        self,
        record_type: str,
        schema: SearchSchema,
        params: QueryParams,
        inbuilt_filter: Optional[FilterExpression] = None,
        default_sort: Optional[SortSpec] = None,
        settings: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Run a saved-search-backed list query.

        Args:
            record_type: Record type searched
            schema: Column schema of the tool
            params: Generic query envelope
            inbuilt_filter: Filter expression always applied
            default_sort: Ordering used when the request names none
            settings: Search settings

        Returns:
            ``{"Count": n}`` in count mode, ``{"items": [...]}`` otherwise
        """
        descriptor = self.search_translator.translate(
            record_type, schema, params, inbuilt_filter, default_sort, settings
        )
        response = await self.execute_search(descriptor)
        data = response.data

        if params.count_only:
            return ResultFormatter.format_count(data.count if data else 0)

        rows = data.items if data else []
        records = ResultFormatter.normalize_positional_rows(rows, schema.output_columns())
        logger.info("%s search returned %d records", record_type, len(records))
        return ResultFormatter.format_items(records)
