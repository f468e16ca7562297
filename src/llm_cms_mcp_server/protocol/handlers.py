"""
MCP Protocol message handlers.

Implements the core logic for handling MCP protocol messages and
routing them to the capability registry.
"""

import json
from typing import Awaitable, Callable, Dict, Optional

import structlog
from pydantic import ValidationError

from .registry import CapabilityRegistry
from .schemas import (
    SUPPORTED_PROTOCOL_VERSIONS,
    MCPCallToolRequest,
    MCPCallToolResponse,
    MCPError,
    MCPGetPromptRequest,
    MCPGetPromptResponse,
    MCPInitializeRequest,
    MCPInitializeResponse,
    MCPListPromptsResponse,
    MCPListResourcesResponse,
    MCPListResourceTemplatesResponse,
    MCPListToolsResponse,
    MCPMethodNotFoundError,
    MCPReadResourceRequest,
    MCPReadResourceResponse,
    MCPRequest,
    MCPResponse,
    MCPValidationError,
    ServerInfo,
)

logger = structlog.get_logger(__name__)


class MCPHandler:
    """
    Main handler for MCP protocol messages.

    Routes each request by method, then by capability name. The handler
    keeps no per-session state: every request is answered from the
    registry alone.
    """

    def __init__(
        self,
        server_info: Optional[ServerInfo] = None,
        registry: Optional[CapabilityRegistry] = None,
    ):
        self.server_info = server_info or ServerInfo()
        self.registry = registry or CapabilityRegistry()

        self._capabilities = {
            "tools": {},
            "resources": {},
            "prompts": {},
        }

        self._routes: Dict[str, Callable[[MCPRequest], Awaitable[MCPResponse]]] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
            "resources/list": self._handle_list_resources,
            "resources/templates/list": self._handle_list_resource_templates,
            "resources/read": self._handle_read_resource,
            "prompts/list": self._handle_list_prompts,
            "prompts/get": self._handle_get_prompt,
        }

    async def handle_request(self, request: MCPRequest) -> MCPResponse:
        """
        Handle incoming MCP request.

        Always returns exactly one response; failures become JSON-RPC
        error responses.

        Args:
            request: Incoming request

        Returns:
            Response to send back to client
        """
        logger.debug(
            "Handling request",
            method=request.method,
            request_id=request.id,
        )

        try:
            route = self._routes.get(request.method)
            if route is None:
                raise MCPMethodNotFoundError(request.method)
            return await route(request)

        except MCPError as e:
            logger.warning(
                "MCP error handling request",
                method=request.method,
                request_id=request.id,
                error_code=e.code,
                error_message=e.message,
            )
            return MCPResponse(
                id=request.id,
                error=e.to_dict(),
            )

        except Exception as e:
            logger.error(
                "Unexpected error handling request",
                method=request.method,
                request_id=request.id,
                error=str(e),
                exc_info=True,
            )
            return MCPResponse(
                id=request.id,
                error={
                    "code": -32603,
                    "message": "Internal error",
                    "data": {"details": str(e)},
                },
            )

    def _parse(self, request_type, request: MCPRequest):
        """Re-validate a generic request as its method-specific type."""
        try:
            return request_type(**request.model_dump(exclude_none=True))
        except ValidationError as e:
            raise MCPValidationError(f"Invalid {request.method} request: {e}")

    async def _handle_initialize(self, request: MCPRequest) -> MCPInitializeResponse:
        """Handle initialize request."""
        init_request = self._parse(MCPInitializeRequest, request)

        logger.info(
            "Initializing MCP session",
            protocol_version=init_request.protocol_version,
            client_info=init_request.params.get("clientInfo"),
        )

        if init_request.protocol_version not in SUPPORTED_PROTOCOL_VERSIONS:
            logger.warning(
                "Unsupported protocol version",
                requested=init_request.protocol_version,
                supported=SUPPORTED_PROTOCOL_VERSIONS,
            )

        return MCPInitializeResponse(
            request_id=request.id,
            protocol_version=init_request.protocol_version,
            server_info=self.server_info,
            capabilities=self._capabilities,
        )

    async def _handle_ping(self, request: MCPRequest) -> MCPResponse:
        return MCPResponse(id=request.id, result={})

    async def _handle_list_tools(self, request: MCPRequest) -> MCPListToolsResponse:
        """Handle list tools request."""
        tools = self.registry.list_tools()
        logger.info("Listing tools", tool_count=len(tools))
        return MCPListToolsResponse(request.id, tools)

    async def _handle_call_tool(self, request: MCPRequest) -> MCPCallToolResponse:
        """
        Handle call tool request.

        Unknown tools and invalid arguments fail the request. Execution
        failures are reported inside the tool result.
        """
        call_request = self._parse(MCPCallToolRequest, request)

        tool_name = call_request.tool_name
        if not tool_name:
            raise MCPValidationError("Missing required parameter: name")

        tool = self.registry.get_tool(tool_name)

        logger.info("Calling tool", tool_name=tool_name)

        try:
            result = await tool(call_request.tool_arguments)
        except MCPError:
            raise
        except Exception as e:
            logger.error(
                "Tool execution failed",
                tool_name=tool_name,
                error=str(e),
                exc_info=True,
            )
            return MCPCallToolResponse(
                request_id=request.id,
                content=[
                    {
                        "type": "text",
                        "text": json.dumps(
                            {"success": False, "error": f"Tool execution failed: {e}"}
                        ),
                    }
                ],
                is_error=True,
            )

        logger.info(
            "Tool execution completed",
            tool_name=tool_name,
            success=not result.is_error,
        )

        return MCPCallToolResponse(
            request_id=request.id,
            content=result.content,
            is_error=result.is_error,
        )

    async def _handle_list_resources(self, request: MCPRequest) -> MCPListResourcesResponse:
        """Handle list resources request."""
        resources = await self.registry.list_resources()
        logger.info("Listing resources", resource_count=len(resources))
        return MCPListResourcesResponse(request.id, resources)

    async def _handle_list_resource_templates(
        self, request: MCPRequest
    ) -> MCPListResourceTemplatesResponse:
        return MCPListResourceTemplatesResponse(
            request.id, self.registry.list_resource_templates()
        )

    async def _handle_read_resource(self, request: MCPRequest) -> MCPReadResourceResponse:
        """Handle read resource request."""
        read_request = self._parse(MCPReadResourceRequest, request)

        uri = read_request.uri
        if uri is None:
            raise MCPValidationError("Missing required parameter: uri")

        contents = await self.registry.resource_provider.read_resource(uri)
        return MCPReadResourceResponse(request.id, [contents])

    async def _handle_list_prompts(self, request: MCPRequest) -> MCPListPromptsResponse:
        """Handle list prompts request."""
        prompts = self.registry.list_prompts()
        logger.info("Listing prompts", prompt_count=len(prompts))
        return MCPListPromptsResponse(request.id, prompts)

    async def _handle_get_prompt(self, request: MCPRequest) -> MCPGetPromptResponse:
        """Handle get prompt request."""
        prompt_request = self._parse(MCPGetPromptRequest, request)

        prompt_name = prompt_request.prompt_name
        if not prompt_name:
            raise MCPValidationError("Missing required parameter: name")

        prompt = self.registry.get_prompt(prompt_name)
        rendered = prompt.render(prompt_request.prompt_arguments)

        logger.info("Prompt rendered", prompt_name=prompt_name)

        return MCPGetPromptResponse(
            request_id=request.id,
            messages=rendered["messages"],
            description=rendered.get("description"),
        )

    @property
    def capabilities(self) -> dict:
        return dict(self._capabilities)
