"""Tool catalog exposed by the MCP server."""

from typing import List

from shopify_mcp.services.shopify_graphql import ShopifyGraphQLClient
from shopify_mcp.services.tools.base import BaseTool, ShopifyQLTool, ToolInput
from shopify_mcp.services.tools.collections import GetCollectionsTool
from shopify_mcp.services.tools.customers import GetCustomersTool, UpdateCustomerTool
from shopify_mcp.services.tools.inventory import GetInventoryLevelsTool, GetLocationsTool
from shopify_mcp.services.tools.orders import (
    GetCustomerOrdersTool,
    GetOrderByIdTool,
    GetOrdersTool,
    SearchOrdersTool,
    UpdateOrderTool,
)
from shopify_mcp.services.tools.products import (
    CreateProductTool,
    GetProductByIdTool,
    GetProductsTool,
)
from shopify_mcp.services.tools.shopifyql_analytics import (
    CustomerAnalyticsTool,
    ProductPerformanceTool,
    RunShopifyQLQueryTool,
    SalesReportTool,
)

# Registration order is the order tools are listed to clients
TOOL_CLASSES = [
    GetProductsTool,
    GetProductByIdTool,
    GetCustomersTool,
    GetOrdersTool,
    GetOrderByIdTool,
    UpdateOrderTool,
    GetCustomerOrdersTool,
    UpdateCustomerTool,
    CreateProductTool,
    RunShopifyQLQueryTool,
    SalesReportTool,
    ProductPerformanceTool,
    CustomerAnalyticsTool,
    GetLocationsTool,
    GetInventoryLevelsTool,
    GetCollectionsTool,
    SearchOrdersTool,
]


def build_tools(client: ShopifyGraphQLClient) -> List[BaseTool]:
    """Instantiate every tool around the shared client."""
    return [tool_class(client) for tool_class in TOOL_CLASSES]


__all__ = [
    "BaseTool",
    "ShopifyQLTool",
    "ToolInput",
    "TOOL_CLASSES",
    "build_tools",
]
