"""
Unit tests for post store backends.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError
from unittest.mock import AsyncMock, MagicMock

from llm_cms_mcp_server.client.base import PostStoreError
from llm_cms_mcp_server.client.memory_store import InMemoryPostStore
from llm_cms_mcp_server.client.mongo_store import MongoPostStore
from llm_cms_mcp_server.config.settings import StoreConfig


class TestInMemoryPostStore:
    """Test the in-memory post store."""

    @pytest.mark.asyncio
    async def test_requires_connection(self):
        post_store = InMemoryPostStore()

        with pytest.raises(PostStoreError):
            await post_store.count_posts()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with InMemoryPostStore() as post_store:
            assert post_store.connected
            await post_store.insert_post("T", "C")

        assert not post_store.connected

    @pytest.mark.asyncio
    async def test_insert_assigns_unique_ids(self, store):
        first = await store.insert_post("A", "a")
        second = await store.insert_post("B", "b")

        assert first.id != second.id
        assert await store.count_posts() == 2

    @pytest.mark.asyncio
    async def test_recent_posts_newest_first(self, store):
        for title in ("A", "B", "C"):
            await store.insert_post(title, title.lower())

        recent = await store.recent_posts(2)

        assert [post.title for post in recent] == ["C", "B"]

    @pytest.mark.asyncio
    async def test_recent_posts_same_timestamp(self):
        instant = datetime(2025, 1, 1, tzinfo=timezone.utc)
        async with InMemoryPostStore(clock=lambda: instant) as post_store:
            await post_store.insert_post("First", "1")
            await post_store.insert_post("Second", "2")

            recent = await post_store.recent_posts(10)

        assert [post.title for post in recent] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_fields(self, store):
        post = await store.insert_post("A", "a")

        updated = await store.update_post(post.id, {"content": "b", "created_at": None})

        assert updated.content == "b"
        assert updated.created_at == post.created_at

    @pytest.mark.asyncio
    async def test_returned_posts_are_copies(self, store):
        post = await store.insert_post("A", "a")
        post.title = "Changed"

        assert (await store.get_post(post.id)).title == "A"

    @pytest.mark.asyncio
    async def test_missing_posts(self, store):
        assert await store.get_post("nope") is None
        assert await store.update_post("nope", {"title": "x"}) is None
        assert await store.delete_post("nope") is False


class TestMongoPostStore:
    """Test the MongoDB post store against a mocked collection."""

    @pytest.fixture
    def collection(self):
        return MagicMock()

    @pytest.fixture
    def mongo_store(self, collection):
        post_store = MongoPostStore(
            StoreConfig(backend="mongodb", mongo_uri="mongodb://localhost:27017", db_name="test")
        )
        post_store._collection = collection
        return post_store

    @pytest.fixture
    def document(self):
        created = datetime(2025, 11, 1, 10, 0, tzinfo=timezone.utc)
        return {
            "_id": ObjectId("6543a1f2c9e77b0012345678"),
            "title": "Hello",
            "content": "World",
            "author": "Ana",
            "createdAt": created,
            "updatedAt": created,
        }

    @pytest.mark.asyncio
    async def test_not_connected(self):
        post_store = MongoPostStore(StoreConfig(backend="mongodb", mongo_uri="mongodb://x"))

        assert not post_store.connected
        with pytest.raises(PostStoreError):
            await post_store.get_post("6543a1f2c9e77b0012345678")

    @pytest.mark.asyncio
    async def test_connect_requires_uri(self, monkeypatch):
        monkeypatch.delenv("MONGO_URI", raising=False)
        post_store = MongoPostStore(StoreConfig(backend="mongodb"))

        with pytest.raises(PostStoreError):
            await post_store.connect()

    @pytest.mark.asyncio
    async def test_insert(self, mongo_store, collection):
        inserted_id = ObjectId("6543a1f2c9e77b0012345678")
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))

        post = await mongo_store.insert_post("Hello", "World")

        document = collection.insert_one.call_args.args[0]
        assert post.id == str(inserted_id)
        assert post.author == "Anonymous"
        assert document["createdAt"] == document["updatedAt"]
        assert set(document) >= {"title", "content", "author", "createdAt", "updatedAt"}

    @pytest.mark.asyncio
    async def test_get_post(self, mongo_store, collection, document):
        collection.find_one = AsyncMock(return_value=document)

        post = await mongo_store.get_post(str(document["_id"]))

        collection.find_one.assert_called_once_with({"_id": document["_id"]})
        assert post.to_dict()["createdAt"] == "2025-11-01T10:00:00Z"

    @pytest.mark.asyncio
    async def test_invalid_object_id_is_not_found(self, mongo_store, collection):
        collection.find_one = AsyncMock()
        collection.delete_one = AsyncMock()

        assert await mongo_store.get_post("not-an-object-id") is None
        assert await mongo_store.delete_post("not-an-object-id") is False
        collection.find_one.assert_not_called()
        collection.delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_sets_only_given_fields(self, mongo_store, collection, document):
        collection.find_one_and_update = AsyncMock(return_value=document)

        await mongo_store.update_post(str(document["_id"]), {"title": "New", "id": "x"})

        args, kwargs = collection.find_one_and_update.call_args
        assert args[0] == {"_id": document["_id"]}
        changes = args[1]["$set"]
        assert set(changes) == {"title", "updatedAt"}
        assert kwargs["return_document"] == ReturnDocument.AFTER

    @pytest.mark.asyncio
    async def test_recent_posts_query(self, mongo_store, collection, document):
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=[document])
        collection.find.return_value.sort.return_value.limit.return_value = cursor

        posts = await mongo_store.recent_posts(3)

        collection.find.return_value.sort.assert_called_once_with(
            [("createdAt", -1), ("_id", -1)]
        )
        collection.find.return_value.sort.return_value.limit.assert_called_once_with(3)
        assert posts[0].title == "Hello"

    @pytest.mark.asyncio
    async def test_delete(self, mongo_store, collection, document):
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))

        assert await mongo_store.delete_post(str(document["_id"])) is True

    @pytest.mark.asyncio
    async def test_driver_error_is_wrapped(self, mongo_store, collection):
        collection.count_documents = AsyncMock(side_effect=PyMongoError("timed out"))

        with pytest.raises(PostStoreError) as exc_info:
            await mongo_store.count_posts()

        assert isinstance(exc_info.value.original_error, PyMongoError)
