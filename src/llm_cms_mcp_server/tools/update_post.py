"""
Update Post tool for LLM CMS MCP Server.

Applies a partial update to an existing post.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from ..client.base import PostStore
from ..protocol.schemas import Tool
from .base import BaseTool, PostNotFoundError, ToolResult


class UpdatePostArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: StrictStr
    title: Optional[StrictStr] = Field(default=None, min_length=1)
    content: Optional[StrictStr] = None
    author: Optional[StrictStr] = None


class UpdatePostTool(BaseTool):
    """
    Tool for updating posts.

    Only the fields present in the call are changed; ``updatedAt`` is
    refreshed on every successful update.
    """

    name = "update_post"
    description = "Update an existing post"
    arguments_model = UpdatePostArguments

    def __init__(self, store: PostStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "id": self._create_parameter("string", "ID of the post to update"),
                "title": self._create_parameter("string", "New title (optional)"),
                "content": self._create_parameter("string", "New content (optional)"),
                "author": self._create_parameter("string", "New author (optional)"),
            },
            required=["id"],
        )

    async def execute(self, arguments: UpdatePostArguments) -> ToolResult:
        fields = arguments.model_dump(exclude={"id"}, exclude_none=True)

        post = await self.store.update_post(arguments.id, fields)
        if post is None:
            raise PostNotFoundError(arguments.id)

        self.logger.info("Post updated", post_id=post.id, fields=sorted(fields))

        return ToolResult.success(message="Post updated successfully")
