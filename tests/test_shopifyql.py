"""Tests for the ShopifyQL query builder."""

import pytest

from shopify_mcp.utils.shopifyql import (
    PERIOD_CLAUSES,
    ShopifyQLQuery,
    build_shopifyql_query,
    group_by_to_order_by,
    group_by_to_shopifyql,
    period_to_shopifyql,
    quote_shopifyql_string,
    rows_to_records,
)


class TestPeriodMapping:
    """Test suite for period_to_shopifyql."""

    @pytest.mark.parametrize("period", sorted(PERIOD_CLAUSES))
    def test_known_periods_are_since_or_during(self, period):
        clause = period_to_shopifyql(period)
        assert clause
        assert clause.startswith("SINCE") or clause.startswith("DURING")

    def test_specific_clauses(self):
        assert period_to_shopifyql("today") == "SINCE today"
        assert period_to_shopifyql("yesterday") == "DURING yesterday"
        assert period_to_shopifyql("last_7_days") == "SINCE -7d"
        assert period_to_shopifyql("this_month") == "SINCE startOfMonth(0m)"
        assert period_to_shopifyql("last_year") == "DURING last_year"

    @pytest.mark.parametrize("period", ["", "fortnight", "LAST_7_DAYS", "last_week"])
    def test_unknown_period_falls_back_to_30_days(self, period):
        assert period_to_shopifyql(period) == "SINCE -30d"


class TestGroupByMapping:
    """Test suite for the GROUP BY / ORDER BY helpers."""

    def test_time_dimensions(self):
        assert group_by_to_shopifyql("week") == "GROUP BY week"
        assert group_by_to_order_by("week") == "ORDER BY week"

    def test_non_time_dimensions_order_by_sales(self):
        assert group_by_to_shopifyql("product") == "GROUP BY product_title"
        assert group_by_to_shopifyql("channel") == "GROUP BY sales_channel"
        assert group_by_to_shopifyql("region") == "GROUP BY billing_country"
        for dimension in ("product", "product_type", "channel", "region", "customer_type"):
            assert group_by_to_order_by(dimension) == "ORDER BY total_sales DESC"

    def test_unknown_dimension_falls_back_to_day(self):
        assert group_by_to_shopifyql("hour") == "GROUP BY day"
        assert group_by_to_order_by("hour") == "ORDER BY day"


class TestBuildQuery:
    """Test suite for build_shopifyql_query."""

    def test_full_query_clause_order(self):
        query = build_shopifyql_query(
            ShopifyQLQuery(
                from_="sales",
                show=["total_sales", "orders"],
                period="last_7_days",
                group_by="day",
                limit=50,
            )
        )
        assert query == (
            "FROM sales SHOW total_sales, orders SINCE -7d GROUP BY day ORDER BY day LIMIT 50"
        )

    def test_minimal_query_omits_optional_clauses(self):
        query = build_shopifyql_query(
            ShopifyQLQuery(from_="sales", show=["total_sales"], period="today")
        )
        assert query == "FROM sales SHOW total_sales SINCE today"
        assert "  " not in query

    def test_explicit_order_by_wins(self):
        query = build_shopifyql_query(
            ShopifyQLQuery(
                from_="sales",
                show=["product_title", "orders"],
                where="product_type = 'Grinder'",
                period="last_30_days",
                group_by="product",
                order_by="ORDER BY orders DESC",
                limit=5,
            )
        )
        assert query == (
            "FROM sales SHOW product_title, orders WHERE product_type = 'Grinder' "
            "SINCE -30d GROUP BY product_title ORDER BY orders DESC LIMIT 5"
        )

    def test_order_by_without_group_by(self):
        query = build_shopifyql_query(
            ShopifyQLQuery(
                from_="sales", show=["orders"], period="bogus", order_by="ORDER BY orders"
            )
        )
        assert query == "FROM sales SHOW orders SINCE -30d ORDER BY orders"


class TestHelpers:
    def test_quote_escapes_quotes(self):
        assert quote_shopifyql_string("Men's") == "'Men\\'s'"
        assert quote_shopifyql_string("plain") == "'plain'"

    def test_rows_to_records(self):
        columns = [{"name": "a"}, {"name": "b"}]
        rows = [[1, 2], {"a": 3, "b": 4}]
        assert rows_to_records(columns, rows) == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]
