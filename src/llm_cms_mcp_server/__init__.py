"""
LLM CMS MCP Server

A Model Context Protocol server that exposes a document-backed CMS of
blog posts as tools, resources and prompts.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .client import InMemoryPostStore, Post, PostStore, PostStoreError
from .config.settings import Config, load_config
from .server import LLMCMSMCPServer

__all__ = [
    "LLMCMSMCPServer",
    "Config",
    "load_config",
    "Post",
    "PostStore",
    "PostStoreError",
    "InMemoryPostStore",
    "__version__",
    "__license__",
]
