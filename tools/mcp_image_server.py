"""
MCP server for the generate_image tool
Serves the tool over MCP stdio, or as a JSON endpoint over HTTP
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from aiohttp import web
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from config import MCP_HTTP_HOST, MCP_HTTP_PORT, MCP_SERVER_NAME, MCP_SERVER_VERSION
from tools.image_tool import ImageToolManager
from utils.error_handler import ToolError, http_status_for
from utils.logging_config import get_logger

logger = get_logger(__name__)

LIST_TOOLS_METHODS = ("list_tools", "tools/list")
CALL_TOOL_METHODS = ("call_tool", "tools/call")


class MCPImageServer:
    """Exposes an ImageToolManager through MCP stdio or a plain HTTP endpoint"""

    def __init__(self, tool_manager: ImageToolManager):
        self.tool_manager = tool_manager

        self.server = Server(MCP_SERVER_NAME, version=MCP_SERVER_VERSION)
        self.server.list_tools()(self.list_tools)
        # Registered directly: the call_tool decorator turns every exception
        # into an isError result, which would hide the protocol error codes
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool_request

        self.app = web.Application()
        self.setup_routes()

    async def list_tools(self) -> List[types.Tool]:
        return [
            types.Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in self.tool_manager.get_available_tools()
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        """Run the tool off the event loop and convert the outcome to MCP types"""
        try:
            result = await asyncio.to_thread(self.tool_manager.execute_tool, name, arguments)
        except ToolError as e:
            logger.warning(f"Tool call {name} rejected: {e.message}")
            raise McpError(types.ErrorData(code=int(e.code), message=e.message)) from e

        return types.CallToolResult(
            content=[
                types.TextContent(type="text", text=block["text"])
                for block in result["content"]
            ],
            isError=result.get("isError", False),
        )

    async def _handle_call_tool_request(self, req: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(result)

    async def run_stdio(self):
        """Serve MCP over stdin/stdout until the client disconnects"""
        logger.info(f"{MCP_SERVER_NAME} running on stdio")
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )

    def setup_routes(self):
        """Setup HTTP routes"""
        self.app.router.add_get("/health", self.health_check)
        self.app.router.add_post("/", self.handle_request)

    async def health_check(self, request):
        """Health check endpoint"""
        return web.json_response(
            {
                "status": "healthy",
                "name": MCP_SERVER_NAME,
                "version": MCP_SERVER_VERSION,
                "response_mode": self.tool_manager.response_mode,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def handle_request(self, request):
        """Dispatch a {"method", "params"} body to the catalog or the tool"""
        try:
            body = await request.json()
        except ValueError:
            return web.json_response({"error": "Invalid JSON"}, status=400)

        if not isinstance(body, dict):
            return web.json_response({"error": "Request body must be an object"}, status=400)

        method = body.get("method")
        params = body.get("params")
        if not isinstance(params, dict):
            params = {}

        try:
            if method in LIST_TOOLS_METHODS:
                result = {"tools": self.tool_manager.get_available_tools()}
            elif method in CALL_TOOL_METHODS:
                result = await asyncio.to_thread(
                    self.tool_manager.execute_tool,
                    params.get("name"),
                    params.get("arguments"),
                )
            else:
                return web.json_response({"error": f"Unknown method: {method}"}, status=404)
        except ToolError as e:
            return web.json_response(
                {"error": e.message, "code": int(e.code)},
                status=http_status_for(e.code),
            )
        except Exception as e:
            logger.exception(f"Unhandled error in {method}")
            return web.json_response({"error": str(e)}, status=500)

        return web.json_response(result)

    async def run_http(self, host=None, port=None):
        """Serve the HTTP endpoint until cancelled"""
        host = host or MCP_HTTP_HOST
        port = port or MCP_HTTP_PORT

        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, host, port)
        await site.start()
        logger.info(f"{MCP_SERVER_NAME} listening on http://{host}:{port}")

        try:
            await asyncio.Future()
        except asyncio.CancelledError:
            logger.info("Shutting down HTTP server")
        finally:
            await runner.cleanup()
