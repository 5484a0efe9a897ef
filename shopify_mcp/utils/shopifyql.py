"""
ShopifyQL query building helpers.

Converts the small, user-friendly option space exposed by the analytics tools
(periods, grouping dimensions) into ShopifyQL clauses and assembles complete
queries from named parts.

Every mapping is total: an unrecognized token falls back to a default clause
instead of raising, so callers can pass through whatever the agent sent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_PERIOD_CLAUSE = "SINCE -30d"
DEFAULT_GROUP_BY_CLAUSE = "GROUP BY day"
DEFAULT_ORDER_BY_CLAUSE = "ORDER BY day"

PERIOD_CLAUSES = {
    "today": "SINCE today",
    "yesterday": "DURING yesterday",
    "last_7_days": "SINCE -7d",
    "last_30_days": "SINCE -30d",
    "last_90_days": "SINCE -90d",
    "last_month": "DURING last_month",
    "this_month": "SINCE startOfMonth(0m)",
    "this_year": "SINCE startOfYear(0y)",
    "last_year": "DURING last_year",
}

GROUP_BY_CLAUSES = {
    "day": "GROUP BY day",
    "week": "GROUP BY week",
    "month": "GROUP BY month",
    "product": "GROUP BY product_title",
    "product_type": "GROUP BY product_type",
    "channel": "GROUP BY sales_channel",
    "region": "GROUP BY billing_country",
    "customer_type": "GROUP BY customer_type",
}

# Time buckets sort chronologically, everything else by revenue
ORDER_BY_CLAUSES = {
    "day": "ORDER BY day",
    "week": "ORDER BY week",
    "month": "ORDER BY month",
    "product": "ORDER BY total_sales DESC",
    "product_type": "ORDER BY total_sales DESC",
    "channel": "ORDER BY total_sales DESC",
    "region": "ORDER BY total_sales DESC",
    "customer_type": "ORDER BY total_sales DESC",
}


def period_to_shopifyql(period: str) -> str:
    """Convert a named period (e.g. ``last_7_days``) to a SINCE/DURING clause.

    Unknown periods fall back to the last 30 days.
    """
    return PERIOD_CLAUSES.get(period, DEFAULT_PERIOD_CLAUSE)


def group_by_to_shopifyql(group_by: str) -> str:
    """Convert a grouping option to a GROUP BY clause (default: by day)."""
    return GROUP_BY_CLAUSES.get(group_by, DEFAULT_GROUP_BY_CLAUSE)


def group_by_to_order_by(group_by: str) -> str:
    """Default ORDER BY clause matching a grouping option (default: by day)."""
    return ORDER_BY_CLAUSES.get(group_by, DEFAULT_ORDER_BY_CLAUSE)


@dataclass
class ShopifyQLQuery:
    """Structured description of a ShopifyQL query.

    ``order_by`` is a complete clause (``"ORDER BY orders DESC"``); ``group_by``
    is a grouping option understood by :func:`group_by_to_shopifyql`.
    """

    from_: str
    show: List[str] = field(default_factory=list)
    period: str = "last_30_days"
    where: Optional[str] = None
    group_by: Optional[str] = None
    order_by: Optional[str] = None
    limit: Optional[int] = None


def build_shopifyql_query(query: ShopifyQLQuery) -> str:
    """
    Build a complete ShopifyQL query string.

    Clause order is fixed: FROM, SHOW, WHERE, period, GROUP BY, ORDER BY, LIMIT.
    Optional clauses that are not set are left out entirely. When no explicit
    ``order_by`` is given, the default ordering for ``group_by`` is used.

    Values are interpolated as-is; quote user-supplied literals with
    :func:`quote_shopifyql_string` before putting them in ``where``.

    Example:
        >>> build_shopifyql_query(ShopifyQLQuery(
        ...     from_="sales", show=["total_sales", "orders"],
        ...     period="last_7_days", group_by="day", limit=50))
        'FROM sales SHOW total_sales, orders SINCE -7d GROUP BY day ORDER BY day LIMIT 50'
    """
    parts = [f"FROM {query.from_}", f"SHOW {', '.join(query.show)}"]

    if query.where:
        parts.append(f"WHERE {query.where}")

    parts.append(period_to_shopifyql(query.period))

    if query.group_by:
        parts.append(group_by_to_shopifyql(query.group_by))

    if query.order_by:
        parts.append(query.order_by)
    elif query.group_by:
        parts.append(group_by_to_order_by(query.group_by))

    if query.limit:
        parts.append(f"LIMIT {query.limit}")

    return " ".join(parts)


def quote_shopifyql_string(value: str) -> str:
    """Quote a user-supplied value as a ShopifyQL string literal.

    >>> quote_shopifyql_string("Men's Shoes")
    "'Men\\\\'s Shoes'"
    """
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def rows_to_records(
    columns: List[Dict[str, Any]], rows: List[Any]
) -> List[Dict[str, Any]]:
    """Turn ShopifyQL table rows into dicts keyed by column name.

    Positional rows (lists) are zipped with the column names; rows that the
    API already returned as objects are passed through unchanged.
    """
    names = [col.get("name") or f"col_{i}" for i, col in enumerate(columns)]
    records = []
    for row in rows:
        if isinstance(row, dict):
            records.append(row)
        else:
            records.append(dict(zip(names, row)))
    return records
