"""Exception hierarchy shared by the client, the tools and the server."""


class ShopifyMCPError(Exception):
    """Base class for every error raised by this package."""


class ToolInputError(ShopifyMCPError, ValueError):
    """Tool arguments failed their declared schema (raised before any request)."""


class ShopifyAPIError(ShopifyMCPError):
    """The Admin API answered with GraphQL errors or mutation userErrors."""


class ShopifyQLParseError(ShopifyMCPError):
    """The analytics engine rejected the ShopifyQL text itself."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"ShopifyQL parse errors: {'; '.join(self.errors)}")


class ToolExecutionError(ShopifyMCPError):
    """A tool call failed; the message embeds the original cause."""
