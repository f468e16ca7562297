"""
Base classes for MCP tools.

Provides common functionality and interfaces for all CMS tools,
including argument validation, error handling, and result formatting.

Tool calls have two failure channels. Invalid arguments raise
``MCPValidationError`` and fail the request before the store is touched.
Failures while executing (missing posts, store errors) are returned as a
``ToolResult`` whose envelope carries ``success: false``.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

import structlog
from pydantic import BaseModel, ValidationError

from ..client.base import PostStoreError
from ..protocol.schemas import MCPValidationError, Tool, ToolSchema

logger = structlog.get_logger(__name__)


class ToolError(Exception):
    """Base exception for tool execution errors."""

    def __init__(
        self, message: str, code: str = "tool_error", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class PostNotFoundError(ToolError):
    """Error for an id that names no stored post."""

    def __init__(self, post_id: str):
        super().__init__("Post not found", code="not_found", details={"id": post_id})


class ToolResult:
    """
    Standardized tool result.

    Wraps the JSON envelope returned to the agent: ``{"success": true, ...}``
    with the tool payload, or ``{"success": false, "error": ...}``.
    """

    def __init__(self, envelope: Dict[str, Any]):
        self.envelope = envelope

    @property
    def is_error(self) -> bool:
        return not self.envelope.get("success", False)

    @classmethod
    def success(cls, **payload: Any) -> "ToolResult":
        """Create a successful result carrying ``payload``."""
        return cls({"success": True, **payload})

    @classmethod
    def error(
        cls,
        message: str,
        error_code: str = "tool_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> "ToolResult":
        """Create an error result."""
        envelope: Dict[str, Any] = {"success": False, "error": message, "code": error_code}
        if details:
            envelope["details"] = details
        return cls(envelope)

    @property
    def content(self) -> List[Dict[str, Any]]:
        return [{"type": "text", "text": json.dumps(self.envelope, ensure_ascii=False)}]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for MCP response."""
        return {
            "content": self.content,
            "isError": self.is_error,
        }


def validate_arguments(model: Type[BaseModel], arguments: Any) -> BaseModel:
    """
    Validate raw tool arguments against a tool's argument model.

    This is the single validation routine shared by every tool; each tool
    only declares which fields are required and which are optional.

    Raises:
        MCPValidationError: If arguments are missing, unknown or mistyped
    """
    if not isinstance(arguments, dict):
        raise MCPValidationError(
            "Tool arguments must be an object",
            data={"actual_type": type(arguments).__name__},
        )

    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        errors = [
            {
                "parameter": ".".join(str(part) for part in error["loc"]),
                "type": error["type"],
                "message": error["msg"],
            }
            for error in e.errors()
        ]
        first = errors[0]
        if first["type"] == "missing":
            message = f"Missing required parameter: {first['parameter']}"
        elif first["type"] == "extra_forbidden":
            message = f"Unknown parameter: {first['parameter']}"
        else:
            message = f"Invalid parameter '{first['parameter']}': {first['message']}"
        raise MCPValidationError(message, data={"errors": errors})


class BaseTool(ABC):
    """
    Base class for all MCP tools.

    Subclasses declare ``name``, ``description`` and ``arguments_model``
    (the enforced required/optional argument table) and implement
    ``get_schema`` and ``execute``.
    """

    name: str = ""
    description: str = ""
    arguments_model: Type[BaseModel] = BaseModel

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize tool with configuration.

        Args:
            config: Tool-specific configuration
        """
        self.config = config or {}
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Set up tool-specific logging."""
        self.logger = logger.bind(tool=self.name)

    @abstractmethod
    def get_schema(self) -> Tool:
        """
        Get the tool schema definition.

        Returns:
            Tool schema for MCP protocol
        """

    @abstractmethod
    async def execute(self, arguments: BaseModel) -> ToolResult:
        """
        Execute the tool with validated arguments.

        Args:
            arguments: Instance of ``arguments_model``

        Returns:
            Tool execution result

        Raises:
            ToolError: If execution fails
        """

    def validate(self, arguments: Any) -> BaseModel:
        """Validate raw arguments; subclasses may add config-dependent checks."""
        return validate_arguments(self.arguments_model, arguments)

    async def __call__(self, arguments: Any) -> ToolResult:
        """
        Validate and execute a tool call.

        Validation errors propagate to the caller; execution errors are
        folded into an error ``ToolResult``.
        """
        validated = self.validate(arguments)

        try:
            self.logger.info("Executing tool", arguments=validated.model_dump(exclude_none=True))

            result = await self.execute(validated)

            self.logger.info("Tool execution completed", success=not result.is_error)

            return result

        except ToolError as e:
            self.logger.warning(
                "Tool execution failed",
                error_code=e.code,
                error_message=e.message,
                details=e.details,
            )
            return ToolResult.error(e.message, e.code, e.details)

        except PostStoreError as e:
            self.logger.error("Post store error", error=e.message)
            return ToolResult.error(e.message, "store_unavailable")

        except Exception as e:
            self.logger.error(
                "Unexpected tool error",
                error=str(e),
                exc_info=True,
            )
            return ToolResult.error(
                "Internal tool error",
                "internal_error",
                {"exception": str(e)},
            )

    def _create_parameter(
        self,
        param_type: str,
        description: str,
        enum: Optional[List[str]] = None,
        default: Optional[Any] = None,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Helper to create JSON Schema parameter definitions."""
        param = {
            "type": param_type,
            "description": description,
        }

        if enum is not None:
            param["enum"] = enum
        if default is not None:
            param["default"] = default
        if minimum is not None:
            param["minimum"] = minimum
        if maximum is not None:
            param["maximum"] = maximum

        return param

    def _create_schema(
        self,
        parameters: Dict[str, Any],
        required: List[str],
    ) -> Tool:
        """Helper to create tool schema with proper JSON Schema format."""
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=ToolSchema(
                type="object",
                properties=parameters,
                required=required,
                additionalProperties=False,
            ),
        )
