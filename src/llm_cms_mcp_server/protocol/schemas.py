"""
MCP Protocol message schemas and data structures.

Defines the JSON-RPC 2.0 message formats for the Model Context Protocol,
including requests, responses, capability descriptors and error handling.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ["2024-11-05", "2025-03-26", "2025-06-18"]


class MCPError(Exception):
    """Base exception for MCP protocol errors."""

    def __init__(
        self,
        message: str,
        code: int = -32000,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to JSON-RPC error format."""
        error_dict = {
            "code": self.code,
            "message": self.message,
        }
        if self.data:
            error_dict["data"] = self.data
        return error_dict


class MCPValidationError(MCPError):
    """Error for invalid request parameters."""

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=-32602, data=data)


class MCPMethodNotFoundError(MCPError):
    """Error for unknown method calls."""

    def __init__(self, method: str):
        super().__init__(f"Method not found: {method}", code=-32601)


class MCPUnknownCapabilityError(MCPError):
    """Error for a tool or prompt name missing from its catalog."""

    def __init__(self, kind: str, name: str):
        super().__init__(
            f"Unknown {kind}: {name}",
            code=-32601,
            data={"kind": kind, "name": name},
        )
        self.kind = kind
        self.name = name


class MCPMalformedLocatorError(MCPValidationError):
    """Error for a resource URI that does not match the post scheme."""

    def __init__(self, uri: Any):
        super().__init__(f"Invalid resource URI: {uri}", data={"uri": str(uri)})


class MCPResourceNotFoundError(MCPError):
    """Error for a resource URI that names no existing post."""

    def __init__(self, uri: str):
        super().__init__(f"Resource not found: {uri}", code=-32002, data={"uri": uri})


class MCPStoreUnavailableError(MCPError):
    """Error for a request that could not reach the post store."""

    def __init__(self, message: str):
        super().__init__(message, code=-32603, data={"reason": "store_unavailable"})


class MCPInternalError(MCPError):
    """Error for internal server issues."""

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=-32603, data=data)


# Base message types
class MCPMessage(BaseModel):
    """Base class for all MCP messages."""

    model_config = ConfigDict(extra="forbid")

    jsonrpc: str = Field(default="2.0", description="JSON-RPC version")


class MCPRequest(MCPMessage):
    """Base class for MCP requests."""

    id: Union[StrictStr, StrictInt] = Field(description="Request ID")
    method: str = Field(description="Method name")
    params: Optional[Dict[str, Any]] = Field(default=None, description="Method parameters")


class MCPResponse(MCPMessage):
    """Base class for MCP responses."""

    id: Optional[Union[str, int]] = Field(description="Request ID, null when it could not be read")
    result: Optional[Dict[str, Any]] = Field(default=None, description="Response result")
    error: Optional[Dict[str, Any]] = Field(default=None, description="Error information")

    def model_dump(self, **kwargs) -> Dict[str, Any]:
        """Dump as a JSON-RPC 2.0 response carrying either result or error."""
        result = super().model_dump(**kwargs)

        if self.error is not None:
            result.pop("result", None)
        else:
            result.pop("error", None)
            result.setdefault("result", {})
            if result["result"] is None:
                result["result"] = {}

        return result


class MCPNotification(MCPMessage):
    """Base class for MCP notifications (no response expected)."""

    method: str = Field(description="Method name")
    params: Optional[Dict[str, Any]] = Field(default=None, description="Method parameters")


# Client info structures
class ClientInfo(BaseModel):
    """Information about the MCP client."""

    name: str = Field(description="Client name")
    version: str = Field(description="Client version")


class ServerInfo(BaseModel):
    """Information about the MCP server."""

    name: str = Field(default="llm-cms-server", description="Server name")
    version: str = Field(default="1.0.0", description="Server version")


# Tool structures
class ToolParameter(BaseModel):
    """Tool parameter definition."""

    type: str = Field(description="Parameter type")
    description: Optional[str] = Field(default=None, description="Parameter description")
    enum: Optional[List[str]] = Field(default=None, description="Allowed values")
    default: Optional[Any] = Field(default=None, description="Default value")
    minimum: Optional[float] = Field(default=None, description="Minimum numeric value")
    maximum: Optional[float] = Field(default=None, description="Maximum numeric value")


class ToolSchema(BaseModel):
    """Tool input schema definition."""

    type: str = Field(default="object", description="Schema type")
    properties: Dict[str, ToolParameter] = Field(description="Tool parameters")
    required: List[str] = Field(default_factory=list, description="Required parameters")
    additionalProperties: bool = Field(default=False, description="Allow undeclared parameters")


class Tool(BaseModel):
    """Tool definition."""

    name: str = Field(description="Tool name")
    description: str = Field(description="Tool description")
    inputSchema: ToolSchema = Field(description="Tool input schema")


# Resource structures
class Resource(BaseModel):
    """Addressable resource descriptor."""

    uri: str = Field(description="Resource locator")
    name: str = Field(description="Display name")
    description: Optional[str] = Field(default=None, description="Resource description")
    mimeType: Optional[str] = Field(default=None, description="Content type")


class ResourceTemplate(BaseModel):
    """Parametrized resource locator descriptor."""

    uriTemplate: str = Field(description="RFC 6570 URI template")
    name: str = Field(description="Template name")
    description: Optional[str] = Field(default=None, description="Template description")
    mimeType: Optional[str] = Field(default=None, description="Content type")


class ResourceContents(BaseModel):
    """Text contents of a read resource."""

    uri: str = Field(description="Resource locator")
    mimeType: Optional[str] = Field(default=None, description="Content type")
    text: str = Field(description="Resource text")


# Prompt structures
class PromptArgument(BaseModel):
    """Prompt argument definition."""

    name: str = Field(description="Argument name")
    description: Optional[str] = Field(default=None, description="Argument description")
    required: bool = Field(default=False, description="Whether the argument is required")


class Prompt(BaseModel):
    """Prompt definition."""

    name: str = Field(description="Prompt name")
    description: Optional[str] = Field(default=None, description="Prompt description")
    arguments: List[PromptArgument] = Field(default_factory=list, description="Prompt arguments")


# Initialize protocol
class MCPInitializeRequest(MCPRequest):
    """Initialize request from client."""

    method: str = Field(default="initialize", frozen=True)
    params: Dict[str, Any] = Field(default_factory=dict, description="Initialize parameters")

    @property
    def protocol_version(self) -> str:
        """Get protocol version from params."""
        version = self.params.get("protocolVersion", PROTOCOL_VERSION)
        return str(version)

    @property
    def client_info(self) -> Optional[ClientInfo]:
        """Get client info from params."""
        client_data = self.params.get("clientInfo")
        return ClientInfo(**client_data) if client_data else None


class MCPInitializeResponse(MCPResponse):
    """Initialize response to client."""

    def __init__(
        self,
        request_id: Union[str, int],
        protocol_version: str = PROTOCOL_VERSION,
        server_info: Optional[ServerInfo] = None,
        capabilities: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            id=request_id,
            result={
                "protocolVersion": protocol_version,
                "serverInfo": (server_info or ServerInfo()).model_dump(),
                "capabilities": capabilities
                or {
                    "tools": {},
                    "resources": {},
                    "prompts": {},
                },
            },
        )


# Tools
class MCPListToolsRequest(MCPRequest):
    """List tools request from client."""

    method: str = Field(default="tools/list", frozen=True)


class MCPListToolsResponse(MCPResponse):
    """List tools response to client."""

    def __init__(self, request_id: Union[str, int], tools: List[Tool]):
        super().__init__(
            id=request_id,
            result={"tools": [tool.model_dump(exclude_none=True) for tool in tools]},
        )


class MCPCallToolRequest(MCPRequest):
    """Call tool request from client."""

    method: str = Field(default="tools/call", frozen=True)
    params: Dict[str, Any] = Field(description="Tool call parameters")

    @property
    def tool_name(self) -> str:
        """Get tool name from params."""
        name = self.params.get("name", "")
        return str(name) if name is not None else ""

    @property
    def tool_arguments(self) -> Any:
        """Get raw tool arguments from params."""
        args = self.params.get("arguments")
        return {} if args is None else args


class MCPCallToolResponse(MCPResponse):
    """Call tool response to client."""

    def __init__(
        self,
        request_id: Union[str, int],
        content: List[Dict[str, Any]],
        is_error: bool = False,
    ):
        super().__init__(
            id=request_id,
            result={
                "content": content,
                "isError": is_error,
            },
        )


# Resources
class MCPListResourcesRequest(MCPRequest):
    """List resources request from client."""

    method: str = Field(default="resources/list", frozen=True)


class MCPListResourcesResponse(MCPResponse):
    """List resources response to client."""

    def __init__(self, request_id: Union[str, int], resources: List[Resource]):
        super().__init__(
            id=request_id,
            result={"resources": [resource.model_dump(exclude_none=True) for resource in resources]},
        )


class MCPListResourceTemplatesResponse(MCPResponse):
    """List resource templates response to client."""

    def __init__(self, request_id: Union[str, int], templates: List[ResourceTemplate]):
        super().__init__(
            id=request_id,
            result={
                "resourceTemplates": [
                    template.model_dump(exclude_none=True) for template in templates
                ]
            },
        )


class MCPReadResourceRequest(MCPRequest):
    """Read resource request from client."""

    method: str = Field(default="resources/read", frozen=True)
    params: Dict[str, Any] = Field(description="Read parameters")

    @property
    def uri(self) -> Any:
        """Get the requested resource URI."""
        return self.params.get("uri")


class MCPReadResourceResponse(MCPResponse):
    """Read resource response to client."""

    def __init__(self, request_id: Union[str, int], contents: List[ResourceContents]):
        super().__init__(
            id=request_id,
            result={"contents": [item.model_dump(exclude_none=True) for item in contents]},
        )


# Prompts
class MCPListPromptsRequest(MCPRequest):
    """List prompts request from client."""

    method: str = Field(default="prompts/list", frozen=True)


class MCPListPromptsResponse(MCPResponse):
    """List prompts response to client."""

    def __init__(self, request_id: Union[str, int], prompts: List[Prompt]):
        super().__init__(
            id=request_id,
            result={"prompts": [prompt.model_dump(exclude_none=True) for prompt in prompts]},
        )


class MCPGetPromptRequest(MCPRequest):
    """Get prompt request from client."""

    method: str = Field(default="prompts/get", frozen=True)
    params: Dict[str, Any] = Field(description="Prompt parameters")

    @property
    def prompt_name(self) -> str:
        """Get prompt name from params."""
        name = self.params.get("name", "")
        return str(name) if name is not None else ""

    @property
    def prompt_arguments(self) -> Any:
        """Get raw prompt arguments from params."""
        args = self.params.get("arguments")
        return {} if args is None else args


class MCPGetPromptResponse(MCPResponse):
    """Get prompt response to client."""

    def __init__(
        self,
        request_id: Union[str, int],
        messages: List[Dict[str, Any]],
        description: Optional[str] = None,
    ):
        result: Dict[str, Any] = {"messages": messages}
        if description:
            result["description"] = description
        super().__init__(id=request_id, result=result)
