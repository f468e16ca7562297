"""
Create Post tool for LLM CMS MCP Server.

Implements the create_post tool that stores a new post in the CMS.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from ..client.base import PostStore
from ..protocol.schemas import Tool
from .base import BaseTool, ToolResult


class CreatePostArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: StrictStr = Field(min_length=1)
    content: StrictStr
    author: Optional[StrictStr] = None


class CreatePostTool(BaseTool):
    """
    Tool for creating posts.

    The author defaults to "Anonymous" when omitted or empty; both
    timestamps are set by the store.
    """

    name = "create_post"
    description = "Create a new post in the CMS"
    arguments_model = CreatePostArguments

    def __init__(self, store: PostStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store

    def get_schema(self) -> Tool:
        """Get the tool schema definition."""
        return self._create_schema(
            parameters={
                "title": self._create_parameter("string", "Post title"),
                "content": self._create_parameter("string", "Post content"),
                "author": self._create_parameter("string", "Post author (optional)"),
            },
            required=["title", "content"],
        )

    async def execute(self, arguments: CreatePostArguments) -> ToolResult:
        post = await self.store.insert_post(
            title=arguments.title,
            content=arguments.content,
            author=arguments.author,
        )

        self.logger.info("Post created", post_id=post.id)

        return ToolResult.success(id=post.id, message="Post created successfully")
