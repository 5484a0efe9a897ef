"""
Helpers for reshaping Shopify Admin API responses.

The Admin API wraps lists in Relay connections (``edges``/``node``) and money
in ``*Set { shopMoney { ... } }`` objects; tools flatten both into plain
JSON-friendly structures.
"""

from typing import Any, Dict, List, Optional


def nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten a connection's ``edges[].node`` into a list of nodes."""
    if not connection:
        return []
    return [
        edge["node"]
        for edge in connection.get("edges") or []
        if edge and edge.get("node")
    ]


def money(value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Flatten a MoneyBag (``{shopMoney: {...}}``) or MoneyV2 into amount + currency."""
    if not value:
        return None
    amount = value.get("shopMoney", value)
    if not amount:
        return None
    return {
        "amount": amount.get("amount"),
        "currencyCode": amount.get("currencyCode"),
    }


def quantity_map(quantities: Optional[List[Dict[str, Any]]]) -> Dict[str, int]:
    """``[{name, quantity}]`` -> ``{name: quantity}``."""
    return {q["name"]: q.get("quantity") or 0 for q in quantities or [] if q.get("name")}


def numeric_id(gid: str) -> str:
    """Return the trailing numeric part of a GID (``gid://shopify/Product/1`` -> ``1``)."""
    return gid.rsplit("/", 1)[-1] if "/" in gid else gid


def to_gid(resource: str, value: str) -> str:
    """Build a GID from a bare numeric ID; full GIDs pass through unchanged."""
    if value.startswith("gid://"):
        return value
    return f"gid://shopify/{resource}/{value}"


def full_name(person: Optional[Dict[str, Any]]) -> str:
    """``firstName lastName`` with missing parts dropped."""
    if not person:
        return ""
    return f"{person.get('firstName') or ''} {person.get('lastName') or ''}".strip()
