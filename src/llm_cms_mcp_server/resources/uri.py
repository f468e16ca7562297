"""
Post resource locators.

Posts are addressed as ``post://<id>``. These two functions are the only
place locators are built or parsed.
"""

from typing import Any

from ..protocol.schemas import MCPMalformedLocatorError

POST_URI_SCHEME = "post"
POST_URI_PREFIX = f"{POST_URI_SCHEME}://"
POST_URI_TEMPLATE = f"{POST_URI_PREFIX}{{id}}"


def encode_post_uri(post_id: str) -> str:
    """Build the locator for a post id."""
    return f"{POST_URI_PREFIX}{post_id}"


def decode_post_uri(uri: Any) -> str:
    """
    Extract the post id from a locator.

    Only the exact ``post://<id>`` form is accepted: the id must be
    non-empty and must not contain another ``://``. No percent-decoding
    is applied and query or fragment parts are not recognized.

    Raises:
        MCPMalformedLocatorError: If ``uri`` is not a post locator
    """
    if not isinstance(uri, str) or not uri.startswith(POST_URI_PREFIX):
        raise MCPMalformedLocatorError(uri)

    post_id = uri[len(POST_URI_PREFIX):]
    if not post_id or "://" in post_id:
        raise MCPMalformedLocatorError(uri)

    return post_id
