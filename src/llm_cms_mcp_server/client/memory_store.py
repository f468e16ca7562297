"""
In-memory post store.

Used for local development (``store.backend = "memory"``) and as the
substitutable store in tests.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import structlog

from .base import DEFAULT_AUTHOR, UPDATABLE_FIELDS, Post, PostStore, PostStoreError, utc_now

logger = structlog.get_logger(__name__)


class InMemoryPostStore(PostStore):
    """Dictionary-backed post store keyed by uuid4 hex ids."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now
        self._posts: Dict[str, Post] = {}
        # insertion sequence, used to order posts created at the same instant
        self._sequence: Dict[str, int] = {}
        self._next_sequence = 0
        self._connected = False
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        self._connected = True
        logger.info("In-memory post store ready")

    async def disconnect(self) -> None:
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise PostStoreError("Post store is not connected")

    async def insert_post(
        self, title: str, content: str, author: Optional[str] = None
    ) -> Post:
        self._ensure_connected()
        async with self._lock:
            now = self._clock()
            post = Post(
                id=uuid.uuid4().hex,
                title=title,
                content=content,
                author=author or DEFAULT_AUTHOR,
                created_at=now,
                updated_at=now,
            )
            self._posts[post.id] = post
            self._sequence[post.id] = self._next_sequence
            self._next_sequence += 1
        return post.model_copy()

    async def list_posts(self) -> List[Post]:
        self._ensure_connected()
        return [post.model_copy() for post in self._posts.values()]

    async def recent_posts(self, limit: int) -> List[Post]:
        self._ensure_connected()
        ordered = sorted(
            self._posts.values(),
            key=lambda post: (post.created_at, self._sequence[post.id]),
            reverse=True,
        )
        return [post.model_copy() for post in ordered[:limit]]

    async def get_post(self, post_id: str) -> Optional[Post]:
        self._ensure_connected()
        post = self._posts.get(post_id)
        return post.model_copy() if post else None

    async def update_post(self, post_id: str, fields: Dict[str, Any]) -> Optional[Post]:
        self._ensure_connected()
        changes = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        async with self._lock:
            post = self._posts.get(post_id)
            if post is None:
                return None
            changes["updated_at"] = self._clock()
            updated = post.model_copy(update=changes)
            self._posts[post_id] = updated
        return updated.model_copy()

    async def delete_post(self, post_id: str) -> bool:
        self._ensure_connected()
        async with self._lock:
            if self._posts.pop(post_id, None) is None:
                return False
            self._sequence.pop(post_id, None)
        return True

    async def count_posts(self) -> int:
        self._ensure_connected()
        return len(self._posts)
