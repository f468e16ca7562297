"""
MongoDB post store.

Wraps the PyMongo async client, translating driver errors into
``PostStoreError`` and documents into ``Post`` models.
"""

import asyncio
import random
from functools import wraps
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from ..config.settings import StoreConfig
from .base import DEFAULT_AUTHOR, UPDATABLE_FIELDS, Post, PostStore, PostStoreError, utc_now

logger = structlog.get_logger(__name__)


def retry_with_backoff(max_retries=3, base_delay=1.0, max_delay=10.0):
    """
    Decorator for retry with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except PyMongoError as e:
                    last_exception = e

                    if attempt < max_retries - 1:
                        delay = min(base_delay * (2**attempt) + random.uniform(0, 1), max_delay)  # nosec B311
                        logger.warning(
                            "MongoDB request failed, retrying",
                            attempt=attempt + 1,
                            max_retries=max_retries,
                            delay_seconds=round(delay, 2),
                            error=str(e),
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error("All retry attempts failed", error=str(e))

            raise last_exception

        return wrapper

    return decorator


def _to_object_id(post_id: str) -> Optional[ObjectId]:
    """Parse a post id, returning None when it cannot name any document."""
    try:
        return ObjectId(post_id)
    except (InvalidId, TypeError):
        return None


def _document_to_post(document: Dict[str, Any]) -> Post:
    return Post(
        id=str(document["_id"]),
        title=document.get("title", ""),
        content=document.get("content", ""),
        author=document.get("author") or DEFAULT_AUTHOR,
        created_at=document["createdAt"],
        updated_at=document.get("updatedAt", document["createdAt"]),
    )


class MongoPostStore(PostStore):
    """
    Post store backed by a MongoDB collection.

    Documents use the ``title``/``content``/``author``/``createdAt``/
    ``updatedAt`` field names; ids are ObjectId hex strings.
    """

    def __init__(self, config: StoreConfig):
        self.config = config
        self._client: Optional[AsyncMongoClient] = None
        self._collection = None
        self._connection_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Connect to MongoDB and verify the server answers a ping."""
        async with self._connection_lock:
            if self._collection is not None:
                return

            if not self.config.mongo_uri:
                raise PostStoreError("MongoDB URI is not configured (set MONGO_URI)")

            client = AsyncMongoClient(
                self.config.mongo_uri,
                serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
                tz_aware=True,
            )
            try:
                await self._ping(client)
            except PyMongoError as e:
                await client.close()
                logger.error("Failed to connect to MongoDB", error=str(e))
                raise PostStoreError(f"Failed to connect to MongoDB: {e}", original_error=e)

            self._client = client
            self._collection = client[self.config.db_name][self.config.collection]
            logger.info(
                "Connected to MongoDB",
                db_name=self.config.db_name,
                collection=self.config.collection,
            )

    @retry_with_backoff(max_retries=3, base_delay=0.5)
    async def _ping(self, client: AsyncMongoClient) -> None:
        await client.admin.command("ping")

    async def disconnect(self) -> None:
        async with self._connection_lock:
            if self._client is None:
                return
            try:
                await self._client.close()
                logger.info("Disconnected from MongoDB")
            finally:
                self._client = None
                self._collection = None

    @property
    def connected(self) -> bool:
        return self._collection is not None

    def _posts(self):
        if self._collection is None:
            raise PostStoreError("Post store is not connected")
        return self._collection

    async def insert_post(
        self, title: str, content: str, author: Optional[str] = None
    ) -> Post:
        now = utc_now()
        document = {
            "title": title,
            "content": content,
            "author": author or DEFAULT_AUTHOR,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self._posts().insert_one(document)
        except PyMongoError as e:
            raise PostStoreError(f"Failed to insert post: {e}", original_error=e)
        document["_id"] = result.inserted_id
        return _document_to_post(document)

    async def list_posts(self) -> List[Post]:
        try:
            documents = await self._posts().find().to_list(length=None)
        except PyMongoError as e:
            raise PostStoreError(f"Failed to list posts: {e}", original_error=e)
        return [_document_to_post(document) for document in documents]

    async def recent_posts(self, limit: int) -> List[Post]:
        try:
            cursor = self._posts().find().sort([("createdAt", -1), ("_id", -1)]).limit(limit)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise PostStoreError(f"Failed to list posts: {e}", original_error=e)
        return [_document_to_post(document) for document in documents]

    async def get_post(self, post_id: str) -> Optional[Post]:
        object_id = _to_object_id(post_id)
        if object_id is None:
            return None
        try:
            document = await self._posts().find_one({"_id": object_id})
        except PyMongoError as e:
            raise PostStoreError(f"Failed to read post {post_id}: {e}", original_error=e)
        return _document_to_post(document) if document else None

    async def update_post(self, post_id: str, fields: Dict[str, Any]) -> Optional[Post]:
        object_id = _to_object_id(post_id)
        if object_id is None:
            return None
        changes = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        changes["updatedAt"] = utc_now()
        try:
            document = await self._posts().find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise PostStoreError(f"Failed to update post {post_id}: {e}", original_error=e)
        return _document_to_post(document) if document else None

    async def delete_post(self, post_id: str) -> bool:
        object_id = _to_object_id(post_id)
        if object_id is None:
            return False
        try:
            result = await self._posts().delete_one({"_id": object_id})
        except PyMongoError as e:
            raise PostStoreError(f"Failed to delete post {post_id}: {e}", original_error=e)
        return result.deleted_count > 0

    async def count_posts(self) -> int:
        try:
            return await self._posts().count_documents({})
        except PyMongoError as e:
            raise PostStoreError(f"Failed to count posts: {e}", original_error=e)
