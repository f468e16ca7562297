"""
MCP Protocol implementation for LLM CMS MCP Server.

This module provides the core Model Context Protocol implementation,
including message handling, capability registry, transport, and schema
definitions.
"""

from .handlers import MCPHandler
from .registry import CapabilityRegistry
from .schemas import (
    MCPCallToolRequest,
    MCPError,
    MCPGetPromptRequest,
    MCPInitializeRequest,
    MCPListPromptsRequest,
    MCPListResourcesRequest,
    MCPListToolsRequest,
    MCPReadResourceRequest,
    MCPRequest,
    MCPResponse,
)
from .transport import StdioTransport

__all__ = [
    "MCPHandler",
    "CapabilityRegistry",
    "StdioTransport",
    "MCPError",
    "MCPInitializeRequest",
    "MCPListToolsRequest",
    "MCPCallToolRequest",
    "MCPListResourcesRequest",
    "MCPReadResourceRequest",
    "MCPListPromptsRequest",
    "MCPGetPromptRequest",
    "MCPRequest",
    "MCPResponse",
]
