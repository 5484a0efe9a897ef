"""Pytest configuration and shared fixtures for Shopify MCP server tests."""

import pytest
from unittest.mock import AsyncMock

from shopify_mcp.config.settings import Settings


@pytest.fixture
def test_settings():
    """Settings pointing at a fake shop, independent of the environment."""
    settings = Settings()
    settings.shopify.access_token = "shpat_test_token_12345"
    settings.shopify.shop_domain = "https://test-shop.myshopify.com/"
    settings.shopify.api_version = "2025-10"
    return settings


@pytest.fixture
def mock_graphql_client():
    """Return a mock ShopifyGraphQLClient for testing without network access.

    ``execute_query`` returns an empty ``data`` payload by default; tests set
    ``return_value`` / ``side_effect`` as needed.
    """
    mock = AsyncMock()
    mock.execute_query = AsyncMock(return_value={})
    return mock


def edges(*nodes):
    """Wrap nodes in a Relay connection."""
    return {"edges": [{"node": node} for node in nodes]}


@pytest.fixture
def inventory_item_node():
    """An inventory item stocked at two locations; 'reserved' is never reported."""
    return {
        "id": "gid://shopify/InventoryItem/1",
        "sku": "ESP-001",
        "tracked": True,
        "inventoryLevels": edges(
            {
                "id": "gid://shopify/InventoryLevel/10",
                "quantities": [
                    {"name": "available", "quantity": 5},
                    {"name": "incoming", "quantity": 2},
                    {"name": "committed", "quantity": 1},
                    {"name": "on_hand", "quantity": 6},
                ],
                "location": {"id": "gid://shopify/Location/1", "name": "Warehouse"},
            },
            {
                "id": "gid://shopify/InventoryLevel/11",
                "quantities": [
                    {"name": "available", "quantity": 3},
                    {"name": "on_hand", "quantity": 4},
                ],
                "location": {"id": "gid://shopify/Location/2", "name": "Retail"},
            },
        ),
        "variant": {
            "id": "gid://shopify/ProductVariant/7",
            "title": "Default Title",
            "displayName": "Espresso Machine - Default Title",
            "product": {"id": "gid://shopify/Product/3", "title": "Espresso Machine"},
        },
    }


@pytest.fixture
def order_node():
    return {
        "id": "gid://shopify/Order/1001",
        "name": "#1001",
        "email": "jane@example.com",
        "createdAt": "2026-02-06T10:00:00Z",
        "updatedAt": "2026-02-06T11:00:00Z",
        "processedAt": "2026-02-06T10:00:00Z",
        "displayFinancialStatus": "PAID",
        "displayFulfillmentStatus": "UNFULFILLED",
        "confirmed": True,
        "closed": False,
        "cancelledAt": None,
        "totalPriceSet": {"shopMoney": {"amount": "150.00", "currencyCode": "USD"}},
        "subtotalPriceSet": {"shopMoney": {"amount": "140.00", "currencyCode": "USD"}},
        "totalTaxSet": {"shopMoney": {"amount": "10.00", "currencyCode": "USD"}},
        "totalShippingPriceSet": {"shopMoney": {"amount": "0.00", "currencyCode": "USD"}},
        "customer": {
            "id": "gid://shopify/Customer/55",
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane@example.com",
        },
        "shippingAddress": None,
        "tags": ["vip"],
        "note": None,
        "lineItems": edges(
            {
                "id": "gid://shopify/LineItem/1",
                "title": "Widget A",
                "sku": "W-A",
                "quantity": 2,
                "originalTotalSet": {"shopMoney": {"amount": "100.00", "currencyCode": "USD"}},
            }
        ),
    }


@pytest.fixture
def sales_table():
    """A shopifyqlQuery payload with positional rows."""
    return {
        "shopifyqlQuery": {
            "tableData": {
                "columns": [
                    {"name": "product_title", "dataType": "STRING", "displayName": "Product"},
                    {"name": "total_sales", "dataType": "MONEY", "displayName": "Total sales"},
                ],
                "rows": [["Widget A", "100.00"], ["Widget B", "50.00"]],
            },
            "parseErrors": [],
        }
    }
