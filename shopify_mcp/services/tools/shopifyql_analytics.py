from typing import Dict, Any, List, Literal, Optional

from pydantic import Field, field_validator

from shopify_mcp.utils.sanitizer import validate_filter_string
from shopify_mcp.utils.shopifyql import (
    ShopifyQLQuery,
    build_shopifyql_query,
    period_to_shopifyql,
    quote_shopifyql_string,
    rows_to_records,
)
from .base import ShopifyQLTool, ToolInput

SalesMetric = Literal[
    "total_sales",
    "net_sales",
    "orders",
    "average_order_value",
    "gross_profit",
    "units_sold",
    "returns",
    "discounts",
]


class RunShopifyQLInput(ToolInput):
    query: str = Field(
        min_length=1,
        description=(
            "ShopifyQL query string. Must include FROM and SHOW clauses. "
            "Example: 'FROM sales SHOW total_sales GROUP BY day SINCE last_week'"
        ),
    )

    @field_validator("query")
    @classmethod
    def check_clauses(cls, value):
        # Basic syntax check: must have FROM and SHOW
        query_upper = value.upper()
        if "FROM" not in query_upper:
            raise ValueError("ShopifyQL query must include FROM clause")
        if "SHOW" not in query_upper:
            raise ValueError("ShopifyQL query must include SHOW clause")
        return value.strip()


class SalesReportInput(ToolInput):
    period: Literal[
        "today",
        "yesterday",
        "last_7_days",
        "last_30_days",
        "last_90_days",
        "last_month",
        "this_month",
        "this_year",
        "last_year",
    ] = Field(default="last_30_days", description="Time period for the report")
    group_by: Literal["day", "week", "month", "product", "channel", "region"] = Field(
        default="day", description="How to group the sales data"
    )
    metrics: List[SalesMetric] = Field(
        default_factory=lambda: ["total_sales", "orders"],
        min_length=1,
        description="Metrics to include in the report",
    )
    limit: int = Field(default=100, ge=1, le=500, description="Maximum number of rows to return")


class ProductPerformanceInput(ToolInput):
    period: Literal[
        "last_7_days",
        "last_30_days",
        "last_90_days",
        "this_month",
        "last_month",
        "this_year",
    ] = Field(default="last_30_days", description="Time period for analysis")
    sort_by: Literal["total_sales", "orders", "units_sold"] = Field(
        default="total_sales", description="Metric to sort results by"
    )
    limit: int = Field(default=20, ge=1, le=100, description="Number of products to return")
    product_type: Optional[str] = Field(default=None, description="Filter by product type")

    @field_validator("product_type")
    @classmethod
    def check_product_type(cls, value):
        return validate_filter_string(value)


class CustomerAnalyticsInput(ToolInput):
    period: Literal[
        "last_7_days",
        "last_30_days",
        "last_90_days",
        "this_month",
        "last_month",
        "this_year",
        "last_year",
    ] = Field(default="last_30_days", description="Time period for analysis")
    report_type: Literal["acquisition", "retention", "spending", "overview"] = Field(
        default="overview", description="Type of customer analytics report"
    )
    group_by: Literal["day", "week", "month"] = Field(
        default="day", description="Time granularity for trending data"
    )


class RunShopifyQLQueryTool(ShopifyQLTool):
    """Tool for running a caller-written ShopifyQL query."""

    name = "run-shopifyql-query"
    description = (
        "Execute a custom ShopifyQL query for analytics. Use this for flexible, custom "
        "analytics queries. Requires read_reports scope. ShopifyQL syntax: FROM <table> "
        "SHOW <metrics> [WHERE <conditions>] [SINCE/DURING <period>] [GROUP BY <dimension>] "
        "[ORDER BY <field>] [LIMIT <n>]. Tables: sales, orders, products, customers. "
        "Example: 'FROM sales SHOW total_sales, orders GROUP BY day SINCE -30d ORDER BY day'"
    )
    input_model = RunShopifyQLInput
    error_action = "execute ShopifyQL query"

    def build_shopifyql(self, params: RunShopifyQLInput) -> str:
        return params.query

    def format_table(self, shopifyql, columns, rows, params) -> Dict[str, Any]:
        return {
            "query": shopifyql,
            "columns": columns,
            "rows": rows,
            "rowCount": len(rows),
        }


class SalesReportTool(ShopifyQLTool):
    """Pre-built sales report over the ``sales`` dataset."""

    name = "get-sales-report"
    description = (
        "Get a pre-built sales analytics report. Returns sales data grouped by time period, "
        "product, channel, or region. Requires read_reports scope."
    )
    input_model = SalesReportInput
    error_action = "fetch sales report"

    def build_shopifyql(self, params: SalesReportInput) -> str:
        return build_shopifyql_query(
            ShopifyQLQuery(
                from_="sales",
                show=list(params.metrics),
                period=params.period,
                group_by=params.group_by,
                limit=params.limit,
            )
        )

    def format_table(self, shopifyql, columns, rows, params) -> Dict[str, Any]:
        return {
            "query": shopifyql,
            "period": params.period,
            "groupBy": params.group_by,
            "columns": columns,
            "rows": rows,
            "rowCount": len(rows),
        }


class ProductPerformanceTool(ShopifyQLTool):
    """Top products ranked by sales, orders or units sold."""

    name = "get-product-performance"
    description = (
        "Get product performance analytics. Returns top products ranked by sales, orders, "
        "or units sold. Requires read_reports scope."
    )
    input_model = ProductPerformanceInput
    error_action = "fetch product performance"

    METRICS = ["product_title", "total_sales", "orders", "units_sold"]

    def build_shopifyql(self, params: ProductPerformanceInput) -> str:
        where = None
        if params.product_type:
            where = f"product_type = {quote_shopifyql_string(params.product_type)}"
        return build_shopifyql_query(
            ShopifyQLQuery(
                from_="sales",
                show=self.METRICS,
                where=where,
                period=params.period,
                group_by="product",
                order_by=f"ORDER BY {params.sort_by} DESC",
                limit=params.limit,
            )
        )

    def format_table(self, shopifyql, columns, rows, params) -> Dict[str, Any]:
        products = rows_to_records(columns, rows)
        return {
            "query": shopifyql,
            "period": params.period,
            "sortBy": params.sort_by,
            "columns": columns,
            "products": products,
            "productCount": len(products),
        }


class CustomerAnalyticsTool(ShopifyQLTool):
    """Customer acquisition, retention and spending reports."""

    name = "get-customer-analytics"
    description = (
        "Get customer analytics including acquisition trends, retention metrics, and "
        "spending patterns. Requires read_reports scope."
    )
    input_model = CustomerAnalyticsInput
    error_action = "fetch customer analytics"

    # {period} is a SINCE/DURING clause, {group_by} a time bucket
    REPORT_TEMPLATES = {
        # New vs returning customers over time
        "acquisition": (
            "FROM sales SHOW total_sales, orders "
            "WHERE customer_type = 'First-time' OR customer_type = 'Returning' "
            "{period} GROUP BY customer_type, {group_by} ORDER BY {group_by}"
        ),
        "retention": (
            "FROM sales SHOW total_sales, orders, average_order_value "
            "{period} GROUP BY customer_type ORDER BY total_sales DESC"
        ),
        # Spending by region
        "spending": (
            "FROM sales SHOW total_sales, orders, average_order_value "
            "{period} GROUP BY billing_country ORDER BY total_sales DESC LIMIT 20"
        ),
        "overview": (
            "FROM sales SHOW total_sales, orders, average_order_value "
            "{period} GROUP BY customer_type, {group_by} ORDER BY {group_by}"
        ),
    }

    def build_shopifyql(self, params: CustomerAnalyticsInput) -> str:
        template = self.REPORT_TEMPLATES.get(params.report_type, self.REPORT_TEMPLATES["overview"])
        return template.format(
            period=period_to_shopifyql(params.period), group_by=params.group_by
        )

    def format_table(self, shopifyql, columns, rows, params) -> Dict[str, Any]:
        results = rows_to_records(columns, rows)
        return {
            "query": shopifyql,
            "period": params.period,
            "reportType": params.report_type,
            "groupBy": params.group_by,
            "columns": columns,
            "results": results,
            "rowCount": len(results),
        }
