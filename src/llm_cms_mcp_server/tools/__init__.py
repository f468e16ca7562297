"""
LLM CMS MCP tools implementation.

This module provides the tool implementations that expose CMS post
operations through the MCP protocol.
"""

from .base import BaseTool, ToolError, ToolResult, validate_arguments
from .create_post import CreatePostTool
from .delete_post import DeletePostTool
from .get_post import GetPostTool
from .list_posts import ListPostsTool
from .update_post import UpdatePostTool

__all__ = [
    "BaseTool",
    "ToolError",
    "ToolResult",
    "validate_arguments",
    "CreatePostTool",
    "ListPostsTool",
    "GetPostTool",
    "UpdatePostTool",
    "DeletePostTool",
]
