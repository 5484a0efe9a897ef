"""
MCP server binding for the Shopify tool catalog.

Lists every tool with its JSON input schema and dispatches ``tools/call``
requests: arguments are validated against the tool's model, the tool runs
its single Admin API round trip, and the result is returned as one text
block holding the JSON-serialized envelope. Errors are re-raised so the MCP
runtime reports them as ``isError`` results.
"""

import json
from typing import Any, Dict, List, Optional

import mcp.server.stdio
import mcp.types as types
from mcp.server import Server

from shopify_mcp.exceptions import ToolInputError
from shopify_mcp.services.tools import BaseTool
from shopify_mcp.utils.logger import get_logger, new_correlation_id

logger = get_logger(__name__)


class ShopifyMCPServer:
    """Registry of tools bound to an MCP ``Server``."""

    def __init__(
        self,
        tools: List[BaseTool],
        server_name: str = "shopify",
        server_version: str = "1.1.0",
        instructions: Optional[str] = None,
    ):
        self.server_name = server_name
        self.server_version = server_version
        self.tools: Dict[str, BaseTool] = {}
        for tool in tools:
            self.register_tool(tool)

        self.server = Server(server_name, version=server_version, instructions=instructions)
        self.setup_handlers()

    def register_tool(self, tool: BaseTool) -> None:
        """Register a tool under its name; names must be unique."""
        if tool.name in self.tools:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        self.tools[tool.name] = tool

    def setup_handlers(self) -> None:
        """Wire list/call handlers into the MCP server."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return await self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: Optional[Dict[str, Any]]
        ) -> List[types.TextContent]:
            return await self.call_tool(name, arguments)

    async def list_tools(self) -> List[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in self.tools.values()
        ]

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> List[types.TextContent]:
        """Validate, execute and serialize one tool invocation.

        Raises:
            ToolInputError: Unknown tool or invalid arguments (no request is made)
            ToolExecutionError: The tool's remote call or mapping failed
        """
        new_correlation_id()
        tool = self.tools.get(name)
        if tool is None:
            raise ToolInputError(f"Unknown tool: {name}")

        params = tool.validate(arguments or {})
        logger.info("Tool call", tool=name)
        result = await tool.execute(params)
        return self.create_json_response(result)

    @staticmethod
    def create_json_response(data: Any) -> List[types.TextContent]:
        """Wrap a result envelope as a single JSON text block."""
        return [types.TextContent(type="text", text=json.dumps(data, ensure_ascii=False))]

    async def run(self) -> None:
        """Serve MCP over stdin/stdout until the client disconnects."""
        logger.info(
            "Starting MCP server",
            server=self.server_name,
            version=self.server_version,
            tools=len(self.tools),
        )
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
