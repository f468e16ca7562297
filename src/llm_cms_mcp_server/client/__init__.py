"""Post store backends."""

from .base import DEFAULT_AUTHOR, Post, PostStore, PostStoreError
from .memory_store import InMemoryPostStore

__all__ = [
    "DEFAULT_AUTHOR",
    "Post",
    "PostStore",
    "PostStoreError",
    "InMemoryPostStore",
]
