"""
Get Post tool for LLM CMS MCP Server.

Fetches a single post, including its body, by id.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, StrictStr

from ..client.base import PostStore
from ..protocol.schemas import Tool
from .base import BaseTool, PostNotFoundError, ToolResult


class GetPostArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: StrictStr


class GetPostTool(BaseTool):
    """Tool for fetching a post by id."""

    name = "get_post"
    description = "Get a specific post by its ID"
    arguments_model = GetPostArguments

    def __init__(self, store: PostStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "id": self._create_parameter("string", "Post ID"),
            },
            required=["id"],
        )

    async def execute(self, arguments: GetPostArguments) -> ToolResult:
        post = await self.store.get_post(arguments.id)
        if post is None:
            raise PostNotFoundError(arguments.id)

        self.logger.info("Post found", post_id=post.id)

        return ToolResult.success(post=post.to_dict())
