"""
Post store contract for the LLM CMS MCP Server.

Defines the post data model and the interface every storage backend
implements. The protocol layer only talks to a store through this
interface, so backends can be swapped without touching tools or resources.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

DEFAULT_AUTHOR = "Anonymous"

# Fields a client may change through update_post
UPDATABLE_FIELDS = ("title", "content", "author")


class PostStoreError(Exception):
    """Raised when the underlying store cannot complete an operation."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class Post(BaseModel):
    """A single CMS post as held by the store."""

    id: str = Field(description="Store-generated identifier")
    title: str = Field(description="Post title")
    content: str = Field(description="Post body")
    author: str = Field(default=DEFAULT_AUTHOR, description="Post author")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last modification timestamp")

    def to_dict(self) -> Dict[str, Any]:
        """Full self-describing representation used by get_post and resources."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": self.author,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    def to_summary(self) -> Dict[str, Any]:
        """Listing projection without the post body."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "createdAt": format_timestamp(self.created_at),
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601, assuming UTC for naive values."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace("+00:00", "Z")


class PostStore(ABC):
    """
    Abstract post store.

    Implementations own the canonical representation of posts. Lookups for
    a missing id return ``None``/``False`` rather than raising; any I/O
    problem is reported as ``PostStoreError``.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Acquire the backend connection."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the backend connection."""

    @property
    @abstractmethod
    def connected(self) -> bool:
        """Whether the store is ready to serve requests."""

    @abstractmethod
    async def insert_post(
        self, title: str, content: str, author: Optional[str] = None
    ) -> Post:
        """Insert a new post and return it with its generated id."""

    @abstractmethod
    async def list_posts(self) -> List[Post]:
        """Return every post in store-defined order."""

    @abstractmethod
    async def recent_posts(self, limit: int) -> List[Post]:
        """Return up to ``limit`` posts, newest ``created_at`` first."""

    @abstractmethod
    async def get_post(self, post_id: str) -> Optional[Post]:
        """Return the post with ``post_id`` or ``None``."""

    @abstractmethod
    async def update_post(self, post_id: str, fields: Dict[str, Any]) -> Optional[Post]:
        """
        Apply ``fields`` to a post and refresh its ``updated_at``.

        Returns the updated post, or ``None`` when no post matched.
        """

    @abstractmethod
    async def delete_post(self, post_id: str) -> bool:
        """Delete a post. Returns ``False`` when no post matched."""

    @abstractmethod
    async def count_posts(self) -> int:
        """Return the number of stored posts."""

    async def __aenter__(self) -> "PostStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
