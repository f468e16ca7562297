"""
List Posts tool for LLM CMS MCP Server.

Lists the most recent posts without their bodies.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ..client.base import PostStore
from ..protocol.schemas import Tool
from .base import BaseTool, ToolResult


class ListPostsArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    limit: Optional[StrictInt] = Field(default=None, ge=1)


class ListPostsTool(BaseTool):
    """
    Tool for listing posts, newest first.

    A limit above ``max_results`` is clamped rather than rejected.
    """

    name = "list_posts"
    description = "List posts in the CMS, newest first"
    arguments_model = ListPostsArguments

    def __init__(self, store: PostStore, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.store = store
        self.default_limit = self.config.get("default_limit", 10)
        self.max_results = self.config.get("max_results", 100)

    def get_schema(self) -> Tool:
        return self._create_schema(
            parameters={
                "limit": self._create_parameter(
                    "integer",
                    f"Maximum number of posts to return (default: {self.default_limit})",
                    default=self.default_limit,
                    minimum=1,
                ),
            },
            required=[],
        )

    async def execute(self, arguments: ListPostsArguments) -> ToolResult:
        requested = arguments.limit or self.default_limit
        limit = min(requested, self.max_results)
        if limit < requested:
            self.logger.debug("Clamped limit", requested=requested, max_results=self.max_results)

        posts = await self.store.recent_posts(limit)

        self.logger.info("Listing posts", count=len(posts), limit=limit)

        return ToolResult.success(
            count=len(posts),
            posts=[post.to_summary() for post in posts],
        )
