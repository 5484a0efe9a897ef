"""
Shopify GraphQL Admin API client shared by every tool.

One instance is built at startup from the configured shop domain and access
token and handed to each tool's constructor. It is never mutated afterwards,
so concurrent tool calls can share it safely.
"""

from typing import Optional, Dict, Any

import httpx

from shopify_mcp.config.settings import Settings
from shopify_mcp.exceptions import ShopifyAPIError
from shopify_mcp.utils.logger import get_logger

logger = get_logger(__name__)


class ShopifyGraphQLClient:
    """Thin async client for the Shopify GraphQL Admin API."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Normalize shop domain: strip protocol, trailing slashes
        domain = settings.shopify.shop_domain.strip()
        domain = domain.replace("https://", "").replace("http://", "").rstrip("/")

        self.shop_domain = domain
        self.access_token = settings.shopify.access_token
        self.api_version = settings.shopify.api_version
        self.endpoint = (
            f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"
        )
        self.headers = {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            timeout=settings.shopify.timeout,
            transport=transport,
        )
        logger.info(
            "ShopifyGraphQLClient initialized",
            shop_domain=self.shop_domain,
            api_version=self.api_version,
        )

    async def close(self):
        """Close the underlying HTTPX client."""
        await self._client.aclose()

    async def execute_query(
        self, query: str, variables: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """Execute a GraphQL document against the Admin API.

        Args:
            query: GraphQL query or mutation document.
            variables: Optional variables bound to the document.

        Returns:
            The ``data`` member of the response.

        Raises:
            httpx.HTTPError: On transport failures or non-2xx responses
                (authentication, throttling, ...).
            ShopifyAPIError: If the response carries top-level GraphQL errors.
        """
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        logger.debug("Executing GraphQL query", variables=variables)

        response = await self._client.post(
            self.endpoint,
            headers=self.headers,
            json=payload,
        )
        response.raise_for_status()
        data = response.json()

        if data.get("errors"):
            error_messages = [
                e.get("message", str(e)) if isinstance(e, dict) else str(e)
                for e in data["errors"]
            ]
            logger.error("GraphQL errors", errors=error_messages)
            raise ShopifyAPIError(f"GraphQL errors: {'; '.join(error_messages)}")

        return data.get("data") or {}
