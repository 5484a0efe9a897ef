from typing import Dict, Any, List, Optional, Tuple, Type
from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from shopify_mcp.exceptions import (
    ShopifyAPIError,
    ShopifyQLParseError,
    ToolExecutionError,
    ToolInputError,
)
from shopify_mcp.services.shopify_graphql import ShopifyGraphQLClient
from shopify_mcp.utils.logger import get_logger

logger = get_logger(__name__)


class ToolInput(BaseModel):
    """Base for tool argument models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseTool(ABC):
    """Abstract base class for all tools.

    A tool is a descriptor (name, description, input model) plus two hooks:
    ``build_request`` turns validated arguments into a GraphQL document and
    variables, ``format_response`` reshapes the returned data. ``execute``
    wires them around exactly one request on the shared client.
    """

    name: str = ""
    description: str = ""
    input_model: Type[ToolInput] = ToolInput
    # Completes "Failed to ...: <cause>" in execution errors
    error_action: str = "execute tool"

    def __init__(self, client: ShopifyGraphQLClient):
        self.client = client

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON schema for tool input."""
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema

    def to_dict(self) -> Dict[str, Any]:
        """Return the dictionary representation of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    def validate(self, input_data: Any) -> ToolInput:
        """Validate input data against the input model.

        Args:
            input_data: Raw tool arguments (or an already validated model)

        Returns:
            The validated model with defaults applied

        Raises:
            ToolInputError: If validation fails; the message names each offending field
        """
        if isinstance(input_data, self.input_model):
            return input_data
        try:
            return self.input_model.model_validate(input_data or {})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            )
            raise ToolInputError(f"Invalid arguments for {self.name}: {problems}") from e

    @abstractmethod
    def build_request(self, params: Any) -> Tuple[str, Optional[Dict[str, Any]]]:
        """Return the GraphQL document and its variables."""
        pass

    @abstractmethod
    def format_response(self, data: Dict[str, Any], params: Any) -> Dict[str, Any]:
        """Reshape the ``data`` member of the response into the result envelope."""
        pass

    async def execute(self, input_data: Any) -> Dict[str, Any]:
        """Run the tool: validate, one remote call, reshape.

        Raises:
            ToolInputError: Before any request, if the arguments are invalid
            ToolExecutionError: If the request or the reshaping fails
        """
        params = self.validate(input_data)
        try:
            query, variables = self.build_request(params)
            data = await self.client.execute_query(query, variables)
            return self.format_response(data, params)
        except Exception as e:
            logger.error(
                "Tool execution failed", tool=self.name, error=str(e), exc_info=True
            )
            raise ToolExecutionError(f"Failed to {self.error_action}: {e}") from e

    @staticmethod
    def raise_for_user_errors(payload: Optional[Dict[str, Any]]) -> None:
        """Raise if a mutation payload reports ``userErrors``."""
        user_errors: List[Dict[str, Any]] = (payload or {}).get("userErrors") or []
        if user_errors:
            messages = []
            for err in user_errors:
                field = err.get("field")
                prefix = f"{'.'.join(field)}: " if field else ""
                messages.append(f"{prefix}{err.get('message')}")
            raise ShopifyAPIError("; ".join(messages))


SHOPIFYQL_DOCUMENT = """
query ShopifyQLQuery($query: String!) {
    shopifyqlQuery(query: $query) {
        tableData {
            columns {
                name
                dataType
                displayName
            }
            rows
        }
        parseErrors
    }
}
"""


class ShopifyQLTool(BaseTool):
    """Base for tools backed by the ``shopifyqlQuery`` analytics field.

    Subclasses produce the ShopifyQL text and shape the table; parse errors
    and empty tables are handled here.
    """

    @abstractmethod
    def build_shopifyql(self, params: Any) -> str:
        """Return the ShopifyQL text for the validated arguments."""
        pass

    @abstractmethod
    def format_table(
        self,
        shopifyql: str,
        columns: List[Dict[str, Any]],
        rows: List[Any],
        params: Any,
    ) -> Dict[str, Any]:
        """Shape table data (possibly empty) into the result envelope."""
        pass

    def build_request(self, params: Any) -> Tuple[str, Optional[Dict[str, Any]]]:
        return SHOPIFYQL_DOCUMENT, {"query": self.build_shopifyql(params)}

    def format_response(self, data: Dict[str, Any], params: Any) -> Dict[str, Any]:
        result = data.get("shopifyqlQuery") or {}

        # parseErrors is a list of strings, or a single string on some API versions
        parse_errors = result.get("parseErrors")
        if parse_errors:
            if not isinstance(parse_errors, list):
                parse_errors = [parse_errors]
            logger.warning("ShopifyQL parse errors", tool=self.name, errors=parse_errors)
            raise ShopifyQLParseError(str(e) for e in parse_errors)

        table_data = result.get("tableData") or {}
        columns = table_data.get("columns") or []
        rows = table_data.get("rows") or []

        logger.info(
            "ShopifyQL query complete", tool=self.name, columns=len(columns), rows=len(rows)
        )
        return self.format_table(self.build_shopifyql(params), columns, rows, params)
