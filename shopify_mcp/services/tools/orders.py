from typing import Dict, Any, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shopify_mcp.utils.formatters import money, nodes, to_gid
from shopify_mcp.utils.sanitizer import validate_filter_string
from .base import BaseTool, ToolInput
from .customers import MetafieldInput

# Shared selection for every order listing
ORDER_FIELDS = """
    id
    name
    email
    createdAt
    updatedAt
    processedAt
    displayFinancialStatus
    displayFulfillmentStatus
    confirmed
    closed
    cancelledAt
    totalPriceSet { shopMoney { amount currencyCode } }
    subtotalPriceSet { shopMoney { amount currencyCode } }
    totalTaxSet { shopMoney { amount currencyCode } }
    totalShippingPriceSet { shopMoney { amount currencyCode } }
    customer {
        id
        firstName
        lastName
        email
    }
    shippingAddress {
        address1
        address2
        city
        province
        country
        zip
    }
    tags
    note
"""


# --------------------------------------------------------------------------
# Inputs
# --------------------------------------------------------------------------

class GetOrdersInput(ToolInput):
    status: Literal["any", "open", "closed", "cancelled"] = Field(
        default="any", description="Order status filter"
    )
    limit: int = Field(default=10, ge=1, le=250, description="Maximum number of orders to return")


class GetOrderByIdInput(ToolInput):
    order_id: str = Field(
        min_length=1, description="Order ID, either numeric or a full gid://shopify/Order/ GID"
    )


class GetCustomerOrdersInput(ToolInput):
    customer_id: str = Field(
        pattern=r"^\d+$",
        description="Shopify customer ID, numeric excluding gid prefix",
    )
    limit: int = Field(default=10, ge=1, le=250, description="Maximum number of orders to return")


class SearchOrdersInput(ToolInput):
    query: str = Field(
        description=(
            "Search query using Shopify search syntax. Examples: 'financial_status:paid', "
            "'fulfillment_status:unfulfilled', 'created_at:>2024-01-01', "
            "'customer_email:test@example.com', 'tag:vip'"
        )
    )
    limit: int = Field(default=20, ge=1, le=50, description="Maximum number of orders to return")
    sort_key: Literal[
        "CREATED_AT",
        "CUSTOMER_NAME",
        "FINANCIAL_STATUS",
        "FULFILLMENT_STATUS",
        "ORDER_NUMBER",
        "PROCESSED_AT",
        "TOTAL_PRICE",
        "UPDATED_AT",
    ] = Field(
        default="CREATED_AT", description="Field to sort orders by"
    )
    reverse: bool = Field(
        default=True, description="Reverse sort order (true = descending, most recent first)"
    )

    @field_validator("query")
    @classmethod
    def check_query(cls, value):
        return validate_filter_string(value)


class CustomAttribute(BaseModel):
    key: str
    value: str


class ShippingAddressInput(ToolInput):
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    company: Optional[str] = None
    country: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    province: Optional[str] = None
    zip: Optional[str] = None


class UpdateOrderInput(ToolInput):
    id: str = Field(min_length=1, description="Order ID, numeric or full GID")
    tags: Optional[List[str]] = None
    email: Optional[EmailStr] = None
    note: Optional[str] = None
    custom_attributes: Optional[List[CustomAttribute]] = None
    metafields: Optional[List[MetafieldInput]] = None
    shipping_address: Optional[ShippingAddressInput] = None


# --------------------------------------------------------------------------
# Formatting
# --------------------------------------------------------------------------

def format_line_item(node: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": node.get("id"),
        "title": node.get("title"),
        "sku": node.get("sku"),
        "quantity": node.get("quantity"),
        "totalPrice": money(node.get("originalTotalSet")),
    }


def format_order(node: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten an order node: money sets, customer, address, line items."""
    customer = node.get("customer")
    address = node.get("shippingAddress")
    return {
        "id": node.get("id"),
        "name": node.get("name"),
        "email": node.get("email"),
        "createdAt": node.get("createdAt"),
        "updatedAt": node.get("updatedAt"),
        "processedAt": node.get("processedAt"),
        "financialStatus": node.get("displayFinancialStatus"),
        "fulfillmentStatus": node.get("displayFulfillmentStatus"),
        "confirmed": node.get("confirmed"),
        "closed": node.get("closed"),
        "cancelledAt": node.get("cancelledAt"),
        "totalPrice": money(node.get("totalPriceSet")),
        "subtotalPrice": money(node.get("subtotalPriceSet")),
        "totalTax": money(node.get("totalTaxSet")),
        "totalShipping": money(node.get("totalShippingPriceSet")),
        "customer": (
            {
                "id": customer.get("id"),
                "firstName": customer.get("firstName"),
                "lastName": customer.get("lastName"),
                "email": customer.get("email"),
            }
            if customer
            else None
        ),
        "shippingAddress": (
            {
                "address1": address.get("address1"),
                "address2": address.get("address2"),
                "city": address.get("city"),
                "province": address.get("province"),
                "country": address.get("country"),
                "zip": address.get("zip"),
            }
            if address
            else None
        ),
        "tags": node.get("tags") or [],
        "note": node.get("note"),
        "lineItems": [format_line_item(li) for li in nodes(node.get("lineItems"))],
    }


def _orders_query(name: str, line_items: int, extra_args: str = "", extra_params: str = "") -> str:
    return f"""
    query {name}($first: Int!, $query: String{extra_params}) {{
        orders(first: $first, query: $query{extra_args}) {{
            edges {{
                node {{
                    {ORDER_FIELDS}
                    lineItems(first: {line_items}) {{
                        edges {{
                            node {{
                                id
                                title
                                sku
                                quantity
                                originalTotalSet {{ shopMoney {{ amount currencyCode }} }}
                            }}
                        }}
                    }}
                }}
            }}
        }}
    }}
    """


# --------------------------------------------------------------------------
# Tools
# --------------------------------------------------------------------------

class GetOrdersTool(BaseTool):
    """List recent orders, optionally filtered by status."""

    name = "get-orders"
    description = "Get orders with optional filtering by status"
    input_model = GetOrdersInput
    error_action = "fetch orders"

    QUERY = _orders_query("GetOrders", line_items=10)

    def build_request(self, params: GetOrdersInput):
        query = None if params.status == "any" else f"status:{params.status}"
        return self.QUERY, {"first": params.limit, "query": query}

    def format_response(self, data, params):
        orders = [format_order(node) for node in nodes(data.get("orders"))]
        return {"orders": orders, "orderCount": len(orders)}


class GetOrderByIdTool(BaseTool):
    """Fetch one order with all of its line items."""

    name = "get-order-by-id"
    description = "Get a specific order by ID"
    input_model = GetOrderByIdInput
    error_action = "fetch order"

    QUERY = f"""
    query GetOrderById($id: ID!) {{
        order(id: $id) {{
            {ORDER_FIELDS}
            customAttributes {{ key value }}
            lineItems(first: 50) {{
                edges {{
                    node {{
                        id
                        title
                        sku
                        quantity
                        originalTotalSet {{ shopMoney {{ amount currencyCode }} }}
                    }}
                }}
            }}
        }}
    }}
    """

    def build_request(self, params: GetOrderByIdInput):
        return self.QUERY, {"id": to_gid("Order", params.order_id)}

    def format_response(self, data, params):
        node = data.get("order")
        if not node:
            raise LookupError(f"Order with ID {params.order_id} not found")
        order = format_order(node)
        order["customAttributes"] = node.get("customAttributes") or []
        return {"order": order}


class GetCustomerOrdersTool(BaseTool):
    """List orders placed by one customer."""

    name = "get-customer-orders"
    description = "Get orders for a specific customer"
    input_model = GetCustomerOrdersInput
    error_action = "fetch customer orders"

    QUERY = _orders_query("GetCustomerOrders", line_items=10)

    def build_request(self, params: GetCustomerOrdersInput):
        return self.QUERY, {
            "first": params.limit,
            "query": f"customer_id:{params.customer_id}",
        }

    def format_response(self, data, params):
        orders = [format_order(node) for node in nodes(data.get("orders"))]
        return {
            "customerId": params.customer_id,
            "orders": orders,
            "orderCount": len(orders),
        }


class SearchOrdersTool(BaseTool):
    """Search orders with the Shopify search syntax and a sort key."""

    name = "search-orders"
    description = (
        "Search orders with advanced filtering. Use Shopify query syntax for powerful "
        "filtering by status, date, customer, tags, and more. Requires read_orders scope."
    )
    input_model = SearchOrdersInput
    error_action = "search orders"

    QUERY = _orders_query(
        "SearchOrders",
        line_items=5,
        extra_args=", sortKey: $sortKey, reverse: $reverse",
        extra_params=", $sortKey: OrderSortKeys, $reverse: Boolean",
    )

    def build_request(self, params: SearchOrdersInput):
        return self.QUERY, {
            "first": params.limit,
            "query": params.query,
            "sortKey": params.sort_key,
            "reverse": params.reverse,
        }

    def format_response(self, data, params):
        orders = [format_order(node) for node in nodes(data.get("orders"))]
        return {
            "query": params.query,
            "sortKey": params.sort_key,
            "reverse": params.reverse,
            "orders": orders,
            "orderCount": len(orders),
        }


class UpdateOrderTool(BaseTool):
    """Update an order's tags, email, note, attributes, metafields or shipping address."""

    name = "update-order"
    description = "Update an existing order with new information"
    input_model = UpdateOrderInput
    error_action = "update order"

    MUTATION = f"""
    mutation UpdateOrder($input: OrderInput!) {{
        orderUpdate(input: $input) {{
            order {{
                {ORDER_FIELDS}
                customAttributes {{ key value }}
            }}
            userErrors {{
                field
                message
            }}
        }}
    }}
    """

    def build_request(self, params: UpdateOrderInput):
        order_input = params.model_dump(by_alias=True, exclude_none=True)
        order_input["id"] = to_gid("Order", params.id)
        return self.MUTATION, {"input": order_input}

    def format_response(self, data, params):
        payload = data.get("orderUpdate") or {}
        self.raise_for_user_errors(payload)
        node = payload.get("order") or {}
        order = format_order(node)
        order["customAttributes"] = node.get("customAttributes") or []
        return {"order": order}
