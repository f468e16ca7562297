"""
Delete Post tool for LLM CMS MCP Server.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, StrictStr

from ..client.base import PostStore
from ..protocol.schemas import Tool
from .base import BaseTool, PostNotFoundError, ToolResult


class DeletePostArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: StrictStr


class DeletePostTool(BaseTool):
    """Tool for deleting posts by id."""

    name = "delete_post"
    description = "Delete a post by its ID"
    arguments_model = DeletePostArguments

    def __init__(self, store: PostStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "id": self._create_parameter("string", "ID of the post to delete"),
            },
            required=["id"],
        )

    async def execute(self, arguments: DeletePostArguments) -> ToolResult:
        if not await self.store.delete_post(arguments.id):
            raise PostNotFoundError(arguments.id)

        self.logger.info("Post deleted", post_id=arguments.id)

        return ToolResult.success(message="Post deleted successfully")
