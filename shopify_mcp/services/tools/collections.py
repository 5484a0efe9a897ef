from typing import Dict, Any, Literal, Optional

from pydantic import Field, field_validator

from shopify_mcp.utils.formatters import nodes
from shopify_mcp.utils.sanitizer import validate_filter_string
from .base import BaseTool, ToolInput


class GetCollectionsInput(ToolInput):
    limit: int = Field(
        default=20, ge=1, le=50, description="Maximum number of collections to return"
    )
    search_query: Optional[str] = Field(default=None, description="Search collections by title")
    collection_type: Literal["smart", "manual", "all"] = Field(
        default="all",
        description="Filter by collection type (smart = automated rules, manual = hand-picked)",
    )

    @field_validator("search_query")
    @classmethod
    def check_search_query(cls, value):
        return validate_filter_string(value)


def collections_filter(search_query: Optional[str], collection_type: str) -> Optional[str]:
    filters = []
    if search_query:
        filters.append(f"title:*{search_query}*")
    if collection_type == "smart":
        filters.append("collection_type:smart")
    elif collection_type == "manual":
        # Shopify calls hand-picked collections "custom"
        filters.append("collection_type:custom")
    return " AND ".join(filters) if filters else None


def format_collection(node: Dict[str, Any]) -> Dict[str, Any]:
    rule_set = node.get("ruleSet")
    is_smart = bool(rule_set and rule_set.get("rules"))
    image = node.get("image") or {}
    return {
        "id": node.get("id"),
        "title": node.get("title"),
        "handle": node.get("handle"),
        "description": node.get("description"),
        "productCount": (node.get("productsCount") or {}).get("count", 0),
        "sortOrder": node.get("sortOrder"),
        "templateSuffix": node.get("templateSuffix"),
        "updatedAt": node.get("updatedAt"),
        "imageUrl": image.get("url"),
        "imageAltText": image.get("altText"),
        "collectionType": "smart" if is_smart else "manual",
        "rules": (
            {
                "appliedDisjunctively": rule_set.get("appliedDisjunctively"),
                "rules": rule_set.get("rules"),
            }
            if is_smart
            else None
        ),
    }


class GetCollectionsTool(BaseTool):
    """List smart and manual collections."""

    name = "get-collections"
    description = (
        "Get product collections. Returns both smart (rule-based) and manual collections "
        "with product counts. Requires read_products scope."
    )
    input_model = GetCollectionsInput
    error_action = "fetch collections"

    QUERY = """
    query GetCollections($first: Int!, $query: String) {
        collections(first: $first, query: $query) {
            edges {
                node {
                    id
                    title
                    handle
                    description
                    productsCount {
                        count
                    }
                    sortOrder
                    templateSuffix
                    updatedAt
                    image {
                        url
                        altText
                    }
                    ruleSet {
                        appliedDisjunctively
                        rules {
                            column
                            relation
                            condition
                        }
                    }
                }
            }
        }
    }
    """

    def build_request(self, params: GetCollectionsInput):
        return self.QUERY, {
            "first": params.limit,
            "query": collections_filter(params.search_query, params.collection_type),
        }

    def format_response(self, data, params):
        collections = [format_collection(node) for node in nodes(data.get("collections"))]
        return {"collections": collections, "collectionCount": len(collections)}
