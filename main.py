"""
Shopify MCP Server - Main Entry Point

Exposes Shopify Admin API operations (products, orders, customers, inventory,
locations, collections and ShopifyQL analytics) as MCP tools over stdio.

Credentials come from command-line flags or the environment / .env file:

    shopify-mcp --accessToken=shpat_xxx --domain=your-store.myshopify.com
"""

import asyncio
import sys
from typing import Optional

import typer

from shopify_mcp.config.settings import Settings, settings
from shopify_mcp.server import ShopifyMCPServer
from shopify_mcp.services.shopify_graphql import ShopifyGraphQLClient
from shopify_mcp.services.tools import build_tools
from shopify_mcp.utils.logger import setup_logging, get_logger


logger = get_logger(__name__)

# Operator guidance for each required value
_MISSING_HINTS = {
    "SHOPIFY_ACCESS_TOKEN": "  Command line: --accessToken=your_token",
    "MYSHOPIFY_DOMAIN": "  Command line: --domain=your-store.myshopify.com",
}

app = typer.Typer(
    name="shopify-mcp",
    help="MCP server for the Shopify Admin API with ShopifyQL analytics.",
    add_completion=False,
)


class ShopifyMCPApp:
    """Wires settings, the shared GraphQL client, the tools and the MCP server."""

    def __init__(self, app_settings: Settings):
        self.settings = app_settings
        self.client: Optional[ShopifyGraphQLClient] = None
        self.server: Optional[ShopifyMCPServer] = None

    def initialize(self) -> None:
        setup_logging(
            level=self.settings.logging.level,
            log_file=self.settings.logging.log_file or None,
        )
        self.client = ShopifyGraphQLClient(self.settings)
        self.server = ShopifyMCPServer(
            build_tools(self.client),
            server_name=self.settings.server.name,
            server_version=self.settings.server.version,
            instructions=self.settings.server.description,
        )

    async def run(self) -> None:
        try:
            await self.server.run()
        finally:
            await self.client.close()
            logger.info("Shopify MCP server stopped")


def check_required(app_settings: Settings) -> None:
    """Exit with guidance on stderr if the access token or shop domain is missing."""
    missing = app_settings.validate()
    if not missing:
        return
    for name in missing:
        typer.echo(f"Error: {name} is required.", err=True)
        typer.echo("Please provide it via command line argument or .env file.", err=True)
        typer.echo(_MISSING_HINTS[name], err=True)
    raise typer.Exit(code=1)


@app.command()
def serve(
    access_token: Optional[str] = typer.Option(
        None, "--accessToken", "--access-token", help="Shopify Admin API access token."
    ),
    domain: Optional[str] = typer.Option(
        None, "--domain", help="Shop domain, e.g. your-store.myshopify.com."
    ),
    api_version: Optional[str] = typer.Option(
        None, "--api-version", help="Admin API version (default 2025-10)."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL."
    ),
) -> None:
    """Run the Shopify MCP server over stdin/stdout."""
    if access_token:
        settings.shopify.access_token = access_token
    if domain:
        settings.shopify.shop_domain = domain
    if api_version:
        settings.shopify.api_version = api_version
    if log_level:
        settings.logging.level = log_level

    check_required(settings)

    shopify_app = ShopifyMCPApp(settings)
    shopify_app.initialize()
    try:
        asyncio.run(shopify_app.run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as e:
        logger.error("Failed to start Shopify MCP Server", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    app()
