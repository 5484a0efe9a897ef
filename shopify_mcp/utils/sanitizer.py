"""
Validation for free-text values that end up inside Shopify search strings
or ShopifyQL literals.
"""

import re
from typing import Optional

# Characters that should NEVER appear in a Shopify filter string.
# These could indicate injection attempts or malformed input.
_FILTER_BLOCKLIST_RE = re.compile(
    r"[{}\[\];`\\]"          # braces, brackets, semicolons, backticks, backslashes
    r"|--"                      # SQL comment sequences
    r"|/\*"                     # C-style comment open
    r"|\bmutation\b"           # GraphQL mutation keyword
    r"|\bsubscription\b"       # GraphQL subscription keyword
    r"|\b__schema\b"           # introspection
    r"|\b__type\b",            # introspection
    re.IGNORECASE,
)

# Max length for a filter/query string
MAX_FILTER_LENGTH = 500


def validate_filter_string(filter_str: Optional[str]) -> Optional[str]:
    """Validate a Shopify filter/query string.

    Ensures the filter contains only characters expected by Shopify's
    search syntax (e.g., ``status:active``, ``tag:sale``,
    ``created_at:>2024-01-01``).

    Args:
        filter_str: The raw filter string from the agent.

    Returns:
        The stripped filter string, or the input unchanged if it was None/empty.

    Raises:
        ValueError: If the filter is too long or contains a blocked pattern.
    """
    if not filter_str:
        return filter_str

    if len(filter_str) > MAX_FILTER_LENGTH:
        raise ValueError(
            f"Filter string too long ({len(filter_str)} chars, max {MAX_FILTER_LENGTH}). "
            "Please simplify your filter."
        )

    match = _FILTER_BLOCKLIST_RE.search(filter_str)
    if match:
        raise ValueError(
            f"Invalid character or pattern in filter: '{match.group()}'. "
            "Filters should only contain field:value pairs like 'status:active' "
            "or 'created_at:>2024-01-01'."
        )

    return filter_str.strip()
