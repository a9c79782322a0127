"""
NetSuite executors.

Send compiled SuiteQL statements and search descriptors to NetSuite
over HTTPS and parse the responses.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from netsuite_query.config import Settings
from netsuite_query.core.errors import BackendError, ConfigurationError, ErrorKind, GatewayError
from netsuite_query.core.models import SearchDescriptor, SearchResponse, SuiteQLPage

logger = logging.getLogger(__name__)

SUITEQL_PATH = "query/v1/suiteql"


def _auth_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


class SuiteQLExecutor:
    """
    Executes SuiteQL statements against the REST query endpoint.

    Implements the ISuiteQLExecutor interface. A connection is opened
    per call.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize SuiteQL executor.

        Args:
            settings: Gateway settings carrying the REST URL and token
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings
        self.transport = transport

    def _url(self) -> str:
        if not self.settings.rest_url or not self.settings.access_token:
            raise ConfigurationError(
                "Missing required environment variables for NetSuite request - "
                "NETSUITE_REST_URL or NETSUITE_ACCESS_TOKEN"
            )
        return f"{self.settings.rest_url.rstrip('/')}/{SUITEQL_PATH}"

    async def execute(self, statement: str, offset: int = 0) -> SuiteQLPage:
        """
        Execute one page of a statement.

        Args:
            statement: SuiteQL statement
            offset: Index of the first row

        Returns:
            SuiteQLPage

        Raises:
            ConfigurationError: If the URL or token is missing
            GatewayError: AIErr wrapping any transport or HTTP failure
        """
        url = self._url()
        headers = _auth_headers(self.settings.access_token)
        headers["Prefer"] = "transient"

        logger.info("Executing SuiteQL at offset %d (%d chars)", offset, len(statement))
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    url, json={"q": statement}, params={"offset": offset}, headers=headers
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("SuiteQL execution failed at offset %d: %s", offset, e)
            raise GatewayError(f"Failed to execute query: {e}", ErrorKind.AI, cause=e) from e

        page = SuiteQLPage.model_validate(data or {})
        logger.info(
            "SuiteQL returned %d rows (total %d, has_more=%s)",
            len(page.items), page.total_count, page.has_more,
        )
        return page


class SearchRestletExecutor:
    """
    Runs search descriptors through the search RESTlet.

    Implements the ISearchExecutor interface.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize search executor.

        Args:
            settings: Gateway settings carrying the RESTlet URL and token
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings
        self.transport = transport

    async def search(self, descriptor: SearchDescriptor) -> SearchResponse:
        """
        Post a descriptor to the RESTlet.

        Args:
            descriptor: Compiled search descriptor

        Returns:
            SearchResponse with ``success`` True

        Raises:
            ConfigurationError: If the RESTlet URL or token is missing
            BackendError: If the RESTlet reports ``success: false``
            GatewayError: AIErr wrapping any transport or HTTP failure
        """
        if not self.settings.search_restlet_url:
            raise ConfigurationError("NETSUITE_SEARCH_REST_LET environment variable not configured")
        if not self.settings.access_token:
            raise ConfigurationError("NETSUITE_ACCESS_TOKEN environment variable not configured")

        payload: Dict[str, Any] = descriptor.to_payload()
        logger.info(
            "Running %s search (max_results=%d, count_only=%s)",
            descriptor.type, descriptor.max_results, descriptor.count_only,
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    self.settings.search_restlet_url,
                    json=payload,
                    headers=_auth_headers(self.settings.access_token),
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Search on %s failed: %s", descriptor.type, e)
            raise GatewayError(f"Failed to execute search: {e}", ErrorKind.AI, cause=e) from e

        result = SearchResponse.model_validate(data or {})
        if not result.success:
            raise BackendError(result.error)
        return result
