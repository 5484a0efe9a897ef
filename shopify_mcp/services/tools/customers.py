from typing import Dict, Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shopify_mcp.utils.formatters import full_name, money, nodes, to_gid
from shopify_mcp.utils.sanitizer import validate_filter_string
from .base import BaseTool, ToolInput


class MetafieldInput(BaseModel):
    id: Optional[str] = None
    namespace: Optional[str] = None
    key: Optional[str] = None
    value: str
    type: Optional[str] = None


class GetCustomersInput(ToolInput):
    search_query: Optional[str] = Field(
        default=None, description="Shopify customer search query (name, email, tag:...)"
    )
    limit: int = Field(
        default=10, ge=1, le=250, description="Maximum number of customers to return"
    )

    @field_validator("search_query")
    @classmethod
    def check_search_query(cls, value):
        return validate_filter_string(value)


class UpdateCustomerInput(ToolInput):
    id: str = Field(
        pattern=r"^\d+$",
        description="Shopify customer ID, numeric excluding gid prefix",
    )
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    tags: Optional[List[str]] = None
    note: Optional[str] = None
    tax_exempt: Optional[bool] = None
    metafields: Optional[List[MetafieldInput]] = None


def format_address(address: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not address:
        return None
    return {
        "address1": address.get("address1"),
        "address2": address.get("address2"),
        "city": address.get("city"),
        "province": address.get("province"),
        "country": address.get("country"),
        "zip": address.get("zip"),
        "phone": address.get("phone"),
    }


def format_customer(node: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": node.get("id"),
        "firstName": node.get("firstName"),
        "lastName": node.get("lastName"),
        "displayName": node.get("displayName") or full_name(node),
        "email": node.get("email"),
        "phone": node.get("phone"),
        "createdAt": node.get("createdAt"),
        "updatedAt": node.get("updatedAt"),
        "tags": node.get("tags") or [],
        "note": node.get("note"),
        "taxExempt": node.get("taxExempt"),
        "numberOfOrders": node.get("numberOfOrders"),
        "amountSpent": money(node.get("amountSpent")),
        "defaultAddress": format_address(node.get("defaultAddress")),
    }


class GetCustomersTool(BaseTool):
    """List customers, optionally filtered by a search query."""

    name = "get-customers"
    description = "Get customers or search by name/email"
    input_model = GetCustomersInput
    error_action = "fetch customers"

    QUERY = """
    query GetCustomers($first: Int!, $query: String) {
        customers(first: $first, query: $query) {
            edges {
                node {
                    id
                    firstName
                    lastName
                    displayName
                    email
                    phone
                    createdAt
                    updatedAt
                    tags
                    note
                    taxExempt
                    numberOfOrders
                    amountSpent { amount currencyCode }
                    defaultAddress {
                        address1
                        address2
                        city
                        province
                        country
                        zip
                        phone
                    }
                }
            }
        }
    }
    """

    def build_request(self, params: GetCustomersInput):
        return self.QUERY, {"first": params.limit, "query": params.search_query}

    def format_response(self, data, params):
        customers = [format_customer(node) for node in nodes(data.get("customers"))]
        return {"customers": customers, "customerCount": len(customers)}


class UpdateCustomerTool(BaseTool):
    """Update a customer's profile fields, tags, note and metafields."""

    name = "update-customer"
    description = "Update a customer's information"
    input_model = UpdateCustomerInput
    error_action = "update customer"

    MUTATION = """
    mutation UpdateCustomer($input: CustomerInput!) {
        customerUpdate(input: $input) {
            customer {
                id
                firstName
                lastName
                displayName
                email
                phone
                createdAt
                updatedAt
                tags
                note
                taxExempt
                numberOfOrders
                amountSpent { amount currencyCode }
                defaultAddress {
                    address1
                    address2
                    city
                    province
                    country
                    zip
                    phone
                }
            }
            userErrors {
                field
                message
            }
        }
    }
    """

    def build_request(self, params: UpdateCustomerInput):
        customer_input = params.model_dump(by_alias=True, exclude_none=True)
        customer_input["id"] = to_gid("Customer", params.id)
        return self.MUTATION, {"input": customer_input}

    def format_response(self, data, params):
        payload = data.get("customerUpdate") or {}
        self.raise_for_user_errors(payload)
        return {"customer": format_customer(payload.get("customer") or {})}
