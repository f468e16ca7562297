"""
Post resources.

Projects stored posts as MCP resources and resolves ``post://`` locators
to the full post document.
"""

import json
from typing import List

import structlog

from ..client.base import DEFAULT_AUTHOR, Post, PostStore, PostStoreError
from ..protocol.schemas import (
    MCPResourceNotFoundError,
    MCPStoreUnavailableError,
    Resource,
    ResourceContents,
    ResourceTemplate,
)
from .uri import POST_URI_TEMPLATE, decode_post_uri, encode_post_uri

logger = structlog.get_logger(__name__)

POST_MIME_TYPE = "application/json"


class PostResourceProvider:
    """
    Resource provider exposing every post as ``post://<id>``.

    Listing never includes post bodies; ``read_resource`` is the
    resource-side entry point that returns the full document.
    """

    def __init__(self, store: PostStore):
        self.store = store

    def describe(self, post: Post) -> Resource:
        """Project a post to its resource descriptor."""
        author = post.author or DEFAULT_AUTHOR
        return Resource(
            uri=encode_post_uri(post.id),
            name=post.title,
            description=f"Post: {post.title} by {author}",
            mimeType=POST_MIME_TYPE,
        )

    def list_templates(self) -> List[ResourceTemplate]:
        return [
            ResourceTemplate(
                uriTemplate=POST_URI_TEMPLATE,
                name="post",
                description="A CMS post addressed by its id",
                mimeType=POST_MIME_TYPE,
            )
        ]

    async def list_resources(self) -> List[Resource]:
        """
        List one resource per stored post, in store order.

        Store failures degrade to an empty listing so discovery stays
        available.
        """
        try:
            posts = await self.store.list_posts()
        except PostStoreError as e:
            logger.error("Failed to list resources", error=e.message)
            return []

        return [self.describe(post) for post in posts]

    async def read_resource(self, uri: str) -> ResourceContents:
        """
        Resolve a post locator to the serialized post.

        Raises:
            MCPMalformedLocatorError: If the URI is not a post locator
            MCPResourceNotFoundError: If no post has the addressed id
            MCPStoreUnavailableError: If the store could not be queried
        """
        post_id = decode_post_uri(uri)

        try:
            post = await self.store.get_post(post_id)
        except PostStoreError as e:
            logger.error("Failed to read resource", uri=uri, error=e.message)
            raise MCPStoreUnavailableError(f"Failed to read resource {uri}: {e.message}")

        if post is None:
            raise MCPResourceNotFoundError(uri)

        logger.info("Resource read", uri=uri, title=post.title)

        return ResourceContents(
            uri=uri,
            mimeType=POST_MIME_TYPE,
            text=json.dumps(post.to_dict(), indent=2, ensure_ascii=False),
        )
