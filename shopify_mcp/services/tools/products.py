from typing import Dict, Any, List, Literal, Optional

from pydantic import Field, field_validator

from shopify_mcp.utils.formatters import money, nodes, to_gid
from shopify_mcp.utils.sanitizer import validate_filter_string
from .base import BaseTool, ToolInput


class GetProductsInput(ToolInput):
    search_title: Optional[str] = Field(
        default=None, description="Filter products by title (partial match)"
    )
    limit: int = Field(
        default=10, ge=1, le=250, description="Maximum number of products to return"
    )

    @field_validator("search_title")
    @classmethod
    def check_search_title(cls, value):
        return validate_filter_string(value)


class GetProductByIdInput(ToolInput):
    product_id: str = Field(
        min_length=1, description="Product ID, either numeric or a full gid://shopify/Product/ GID"
    )


class CreateProductInput(ToolInput):
    title: str = Field(min_length=1, description="Product title")
    description_html: Optional[str] = Field(default=None, description="HTML description")
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Literal["ACTIVE", "DRAFT", "ARCHIVED"] = Field(
        default="DRAFT", description="Initial product status"
    )


def format_variant(node: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": node.get("id"),
        "title": node.get("title"),
        "price": node.get("price"),
        "sku": node.get("sku"),
        "inventoryQuantity": node.get("inventoryQuantity"),
    }


def format_product(node: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a product node: price range, first image, variants."""
    price_range = node.get("priceRangeV2") or {}
    images = nodes(node.get("images"))
    image = images[0] if images else {}
    return {
        "id": node.get("id"),
        "title": node.get("title"),
        "description": node.get("description"),
        "handle": node.get("handle"),
        "status": node.get("status"),
        "vendor": node.get("vendor"),
        "productType": node.get("productType"),
        "tags": node.get("tags") or [],
        "createdAt": node.get("createdAt"),
        "updatedAt": node.get("updatedAt"),
        "totalInventory": node.get("totalInventory"),
        "priceRange": {
            "minPrice": money(price_range.get("minVariantPrice")),
            "maxPrice": money(price_range.get("maxVariantPrice")),
        },
        "imageUrl": image.get("url"),
        "imageAltText": image.get("altText"),
        "variants": [format_variant(v) for v in nodes(node.get("variants"))],
    }


class GetProductsTool(BaseTool):
    """List products, optionally filtered by title."""

    name = "get-products"
    description = "Get all products or search by title"
    input_model = GetProductsInput
    error_action = "fetch products"

    QUERY = """
    query GetProducts($first: Int!, $query: String) {
        products(first: $first, query: $query) {
            edges {
                node {
                    id
                    title
                    description
                    handle
                    status
                    vendor
                    productType
                    tags
                    createdAt
                    updatedAt
                    totalInventory
                    priceRangeV2 {
                        minVariantPrice { amount currencyCode }
                        maxVariantPrice { amount currencyCode }
                    }
                    images(first: 1) {
                        edges { node { url altText } }
                    }
                    variants(first: 5) {
                        edges {
                            node { id title price inventoryQuantity sku }
                        }
                    }
                }
            }
        }
    }
    """

    def build_request(self, params: GetProductsInput):
        query = f"title:*{params.search_title}*" if params.search_title else None
        return self.QUERY, {"first": params.limit, "query": query}

    def format_response(self, data, params):
        products = [format_product(node) for node in nodes(data.get("products"))]
        return {"products": products, "productCount": len(products)}


class GetProductByIdTool(BaseTool):
    """Fetch a single product with its variants and collections."""

    name = "get-product-by-id"
    description = "Get a specific product by ID"
    input_model = GetProductByIdInput
    error_action = "fetch product"

    QUERY = """
    query GetProductById($id: ID!) {
        product(id: $id) {
            id
            title
            description
            handle
            status
            vendor
            productType
            tags
            createdAt
            updatedAt
            totalInventory
            priceRangeV2 {
                minVariantPrice { amount currencyCode }
                maxVariantPrice { amount currencyCode }
            }
            images(first: 5) {
                edges { node { url altText } }
            }
            collections(first: 5) {
                edges { node { id title } }
            }
            variants(first: 20) {
                edges {
                    node {
                        id
                        title
                        price
                        inventoryQuantity
                        sku
                        selectedOptions { name value }
                    }
                }
            }
        }
    }
    """

    def build_request(self, params: GetProductByIdInput):
        return self.QUERY, {"id": to_gid("Product", params.product_id)}

    def format_response(self, data, params):
        node = data.get("product")
        if not node:
            raise LookupError(f"Product with ID {params.product_id} not found")

        product = format_product(node)
        product["images"] = [
            {"url": img.get("url"), "altText": img.get("altText")}
            for img in nodes(node.get("images"))
        ]
        product["collections"] = [
            {"id": c.get("id"), "title": c.get("title")} for c in nodes(node.get("collections"))
        ]
        product["variants"] = [
            {
                **format_variant(v),
                "options": v.get("selectedOptions") or [],
            }
            for v in nodes(node.get("variants"))
        ]
        return {"product": product}


class CreateProductTool(BaseTool):
    """Create a product (DRAFT unless told otherwise)."""

    name = "create-product"
    description = "Create a new product. When using productType, also use vendor and tags."
    input_model = CreateProductInput
    error_action = "create product"

    MUTATION = """
    mutation CreateProduct($product: ProductCreateInput!) {
        productCreate(product: $product) {
            product {
                id
                title
                description
                handle
                status
                vendor
                productType
                tags
                createdAt
                updatedAt
                totalInventory
            }
            userErrors {
                field
                message
            }
        }
    }
    """

    def build_request(self, params: CreateProductInput):
        product = params.model_dump(by_alias=True, exclude_none=True)
        return self.MUTATION, {"product": product}

    def format_response(self, data, params):
        payload = data.get("productCreate") or {}
        self.raise_for_user_errors(payload)
        return {"product": format_product(payload.get("product") or {})}
