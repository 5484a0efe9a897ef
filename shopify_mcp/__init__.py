"""Shopify MCP server: Shopify Admin API operations exposed as MCP tools."""

__version__ = "1.1.0"
