"""MCP resources exposing CMS posts."""

from .posts import PostResourceProvider
from .uri import decode_post_uri, encode_post_uri

__all__ = ["PostResourceProvider", "decode_post_uri", "encode_post_uri"]
