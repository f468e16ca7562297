"""
Capability registry for MCP Server.

Holds the three capability catalogs (tools, resources, prompts) that the
protocol handler lists and dispatches against. Tool and prompt entries are
fixed once registered; resources are a live projection supplied by a
resource provider.
"""

from typing import Any, Dict, List, Optional

import structlog

from .schemas import MCPUnknownCapabilityError, Prompt, Resource, ResourceTemplate, Tool

logger = structlog.get_logger(__name__)


class CapabilityRegistry:
    """
    Central registry for tools, prompts and the resource provider.

    Tools are callables taking the raw argument object and exposing
    ``get_schema()``; prompts expose ``get_schema()`` and ``render()``;
    the resource provider exposes ``list_resources()``,
    ``list_templates()`` and ``read_resource()``.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, Any] = {}
        self._tool_schemas: Dict[str, Tool] = {}
        self._prompts: Dict[str, Any] = {}
        self._resource_provider: Optional[Any] = None

    def register_tool(self, tool: Any) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        schema = tool.get_schema()
        if schema.name in self._tools:
            raise ValueError(f"Tool '{schema.name}' is already registered")

        self._tools[schema.name] = tool
        self._tool_schemas[schema.name] = schema
        logger.info("Registered tool", tool_name=schema.name)

    def register_prompt(self, prompt: Any) -> None:
        """
        Register a prompt template.

        Raises:
            ValueError: If a prompt with the same name is already registered
        """
        if prompt.name in self._prompts:
            raise ValueError(f"Prompt '{prompt.name}' is already registered")

        self._prompts[prompt.name] = prompt
        logger.info("Registered prompt", prompt_name=prompt.name)

    def set_resource_provider(self, provider: Any) -> None:
        self._resource_provider = provider
        logger.info("Registered resource provider", provider=type(provider).__name__)

    def get_tool(self, name: str) -> Any:
        """
        Look up a tool by name.

        Raises:
            MCPUnknownCapabilityError: If no tool has that name
        """
        if name not in self._tools:
            raise MCPUnknownCapabilityError("tool", name)
        return self._tools[name]

    def get_prompt(self, name: str) -> Any:
        """
        Look up a prompt by name.

        Raises:
            MCPUnknownCapabilityError: If no prompt has that name
        """
        if name not in self._prompts:
            raise MCPUnknownCapabilityError("prompt", name)
        return self._prompts[name]

    @property
    def resource_provider(self) -> Any:
        """
        The registered resource provider.

        Raises:
            MCPUnknownCapabilityError: If resources are not configured
        """
        if self._resource_provider is None:
            raise MCPUnknownCapabilityError("resource provider", "resources")
        return self._resource_provider

    def list_tools(self) -> List[Tool]:
        return list(self._tool_schemas.values())

    def list_prompts(self) -> List[Prompt]:
        return [prompt.get_schema() for prompt in self._prompts.values()]

    async def list_resources(self) -> List[Resource]:
        """
        List the current resources.

        Never raises: a missing provider or a failing backend yields an
        empty listing.
        """
        if self._resource_provider is None:
            return []
        try:
            return await self._resource_provider.list_resources()
        except Exception as e:
            logger.error("Resource listing failed", error=str(e), exc_info=True)
            return []

    def list_resource_templates(self) -> List[ResourceTemplate]:
        if self._resource_provider is None:
            return []
        return self._resource_provider.list_templates()

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools.keys())

    @property
    def prompt_names(self) -> List[str]:
        return list(self._prompts.keys())
