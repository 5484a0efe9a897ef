from typing import Dict, Any, Optional

from pydantic import Field, field_validator

from shopify_mcp.utils.formatters import nodes, numeric_id, quantity_map
from shopify_mcp.utils.sanitizer import validate_filter_string
from .base import BaseTool, ToolInput


class GetLocationsInput(ToolInput):
    limit: int = Field(
        default=20, ge=1, le=50, description="Maximum number of locations to return"
    )
    include_inactive: bool = Field(
        default=False, description="Whether to include deactivated locations"
    )


class GetInventoryLevelsInput(ToolInput):
    limit: int = Field(
        default=20, ge=1, le=50, description="Maximum number of inventory items to return"
    )
    sku: Optional[str] = Field(default=None, description="Filter by SKU (exact match)")
    product_id: Optional[str] = Field(default=None, description="Filter by product ID")

    @field_validator("sku", "product_id")
    @classmethod
    def check_filters(cls, value):
        return validate_filter_string(value)


def inventory_filter(sku: Optional[str], product_id: Optional[str]) -> Optional[str]:
    """Search filter for inventoryItems; a SKU filter takes precedence over a product ID."""
    if sku:
        return f"sku:{sku}"
    if product_id:
        return f"product_id:{numeric_id(product_id)}"
    return None


def format_inventory_level(node: Dict[str, Any]) -> Dict[str, Any]:
    quantities = quantity_map(node.get("quantities"))
    location = node.get("location") or {}
    return {
        "locationId": location.get("id"),
        "locationName": location.get("name"),
        "available": quantities.get("available", 0),
        "incoming": quantities.get("incoming", 0),
        "committed": quantities.get("committed", 0),
        "reserved": quantities.get("reserved", 0),
        "onHand": quantities.get("on_hand", 0),
    }


def format_inventory_item(node: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten an inventory item and total its per-location quantities."""
    levels = [format_inventory_level(level) for level in nodes(node.get("inventoryLevels"))]
    variant = node.get("variant")
    product = (variant or {}).get("product") or {}
    return {
        "id": node.get("id"),
        "sku": node.get("sku"),
        "tracked": node.get("tracked"),
        "variant": (
            {
                "id": variant.get("id"),
                "title": variant.get("title"),
                "displayName": variant.get("displayName"),
                "productId": product.get("id"),
                "productTitle": product.get("title"),
            }
            if variant
            else None
        ),
        "inventoryLevels": levels,
        "totalAvailable": sum(level["available"] for level in levels),
        "totalOnHand": sum(level["onHand"] for level in levels),
    }


class GetLocationsTool(BaseTool):
    """List fulfillment locations with their addresses."""

    name = "get-locations"
    description = (
        "Get store locations. Returns all fulfillment locations including warehouses, "
        "retail stores, and drop shippers. Requires read_locations scope."
    )
    input_model = GetLocationsInput
    error_action = "fetch locations"

    QUERY = """
    query GetLocations($first: Int!, $includeInactive: Boolean) {
        locations(first: $first, includeInactive: $includeInactive) {
            edges {
                node {
                    id
                    name
                    isActive
                    fulfillsOnlineOrders
                    hasActiveInventory
                    shipsInventory
                    address {
                        address1
                        address2
                        city
                        province
                        provinceCode
                        country
                        countryCode
                        zip
                        phone
                    }
                }
            }
        }
    }
    """

    ADDRESS_FIELDS = (
        "address1", "address2", "city", "province", "provinceCode",
        "country", "countryCode", "zip", "phone",
    )

    def build_request(self, params: GetLocationsInput):
        return self.QUERY, {
            "first": params.limit,
            "includeInactive": params.include_inactive,
        }

    def format_response(self, data, params):
        locations = []
        for node in nodes(data.get("locations")):
            address = node.get("address") or {}
            locations.append({
                "id": node.get("id"),
                "name": node.get("name"),
                "isActive": node.get("isActive"),
                "fulfillsOnlineOrders": node.get("fulfillsOnlineOrders"),
                "hasActiveInventory": node.get("hasActiveInventory"),
                "shipsInventory": node.get("shipsInventory"),
                "address": {key: address.get(key) for key in self.ADDRESS_FIELDS},
            })
        return {"locations": locations, "locationCount": len(locations)}


class GetInventoryLevelsTool(BaseTool):
    """Inventory quantities per item and location."""

    name = "get-inventory-levels"
    description = (
        "Get inventory levels across all locations. Returns available, incoming, "
        "committed, and reserved quantities. Requires read_inventory scope."
    )
    input_model = GetInventoryLevelsInput
    error_action = "fetch inventory levels"

    QUERY = """
    query GetInventoryLevels($first: Int!, $query: String) {
        inventoryItems(first: $first, query: $query) {
            edges {
                node {
                    id
                    sku
                    tracked
                    inventoryLevels(first: 10) {
                        edges {
                            node {
                                id
                                quantities(
                                    names: ["available", "incoming", "committed", "reserved", "on_hand"]
                                ) {
                                    name
                                    quantity
                                }
                                location {
                                    id
                                    name
                                }
                            }
                        }
                    }
                    variant {
                        id
                        title
                        displayName
                        product {
                            id
                            title
                        }
                    }
                }
            }
        }
    }
    """

    def build_request(self, params: GetInventoryLevelsInput):
        return self.QUERY, {
            "first": params.limit,
            "query": inventory_filter(params.sku, params.product_id),
        }

    def format_response(self, data, params):
        items = [format_inventory_item(node) for node in nodes(data.get("inventoryItems"))]
        return {
            "filter": inventory_filter(params.sku, params.product_id),
            "inventoryItems": items,
            "itemCount": len(items),
        }
