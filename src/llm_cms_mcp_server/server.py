"""
Main LLM CMS MCP Server implementation.

Coordinates the post store, capability registry, protocol handler and
transport to serve CMS posts to MCP hosts.
"""

import asyncio
import signal
import sys
from typing import Any, Dict, List, Optional

import structlog

from .client.base import PostStore, PostStoreError
from .client.memory_store import InMemoryPostStore
from .config.settings import Config
from .prompts.templates import default_prompts
from .protocol.handlers import MCPHandler
from .protocol.registry import CapabilityRegistry
from .protocol.schemas import ServerInfo
from .protocol.transport import StdioTransport
from .resources.posts import PostResourceProvider
from .tools.create_post import CreatePostTool
from .tools.delete_post import DeletePostTool
from .tools.get_post import GetPostTool
from .tools.list_posts import ListPostsTool
from .tools.update_post import UpdatePostTool

logger = structlog.get_logger(__name__)

TOOL_CLASSES = [
    CreatePostTool,
    ListPostsTool,
    GetPostTool,
    UpdatePostTool,
    DeletePostTool,
]


def create_store(config: Config) -> PostStore:
    """Build the post store selected by ``config.store.backend``."""
    if config.store.backend == "memory":
        return InMemoryPostStore()

    from .client.mongo_store import MongoPostStore

    return MongoPostStore(config.store)


class LLMCMSMCPServer:
    """
    Main MCP server for the LLM CMS.

    The store connection is acquired once in ``start()`` and shared by
    every tool and resource for the lifetime of the server.
    """

    def __init__(
        self,
        config: Config,
        store: Optional[PostStore] = None,
        transport: Optional[StdioTransport] = None,
    ):
        """
        Initialize the MCP server.

        Args:
            config: Server configuration
            store: Post store to use instead of the configured backend
            transport: Transport to use instead of process stdio
        """
        self.config = config
        self._running = False
        self._shutdown_event = asyncio.Event()

        self.store = store or create_store(config)
        self.registry = CapabilityRegistry()
        self.mcp_handler = MCPHandler(
            server_info=ServerInfo(
                name=config.server.name,
                version=config.version,
            ),
            registry=self.registry,
        )
        self.transport = transport or StdioTransport()

        self._tools: Dict[str, Any] = {}
        self._signals: List[int] = []

    async def start(self) -> None:
        """Connect the store and register every capability."""
        if self._running:
            return

        logger.info("Starting LLM CMS MCP Server", store_backend=self.config.store.backend)

        try:
            await self.store.connect()

            self._register_tools()
            self._register_resources()
            self._register_prompts()

            self.transport.set_message_handler(self.mcp_handler.handle_request)

            self._running = True

            logger.info(
                "Server started successfully",
                tools_registered=len(self._tools),
                prompts_registered=len(self.registry.prompt_names),
                store_connected=self.store.connected,
            )

        except Exception as e:
            logger.error("Failed to start server", error=str(e), exc_info=True)
            await self.store.disconnect()
            raise

    async def stop(self) -> None:
        """Stop the MCP server."""
        if not self._running:
            return

        logger.info("Stopping LLM CMS MCP Server")

        self._running = False
        self._shutdown_event.set()

        await self.transport.stop()
        await self.transport.drain()
        await self.store.disconnect()

        logger.info("Server stopped")

    async def run_stdio(self) -> None:
        """
        Run the server over stdio until EOF or a shutdown signal.
        """
        try:
            await self.start()
            self._setup_signal_handlers()

            transport_task = asyncio.create_task(self.transport.start())
            shutdown_task = asyncio.create_task(self._shutdown_event.wait())

            await asyncio.wait(
                {transport_task, shutdown_task},
                return_when=asyncio.FIRST_COMPLETED,
            )

            for task in (transport_task, shutdown_task):
                if not task.done():
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        pass

        except Exception as e:
            logger.error("Server error", error=str(e), exc_info=True)
            raise
        finally:
            self._remove_signal_handlers()
            await self.stop()

    def _register_tools(self) -> None:
        """Register enabled tools with the capability registry."""
        for tool_class in TOOL_CLASSES:
            tool_config = getattr(self.config.tools, tool_class.name)
            if not tool_config.enabled:
                logger.debug("Skipping disabled tool", tool_name=tool_class.name)
                continue

            tool = tool_class(self.store, tool_config.model_dump())
            self._tools[tool.name] = tool
            self.registry.register_tool(tool)

        logger.info(
            "Tools registered successfully",
            enabled_tools=list(self._tools.keys()),
            total_tools=len(self._tools),
        )

    def _register_resources(self) -> None:
        self.registry.set_resource_provider(PostResourceProvider(self.store))

    def _register_prompts(self) -> None:
        for prompt in default_prompts():
            self.registry.register_prompt(prompt)

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        if sys.platform == "win32":
            return

        loop = asyncio.get_running_loop()

        def signal_handler(signum: int) -> None:
            logger.info("Received signal, initiating shutdown", signal=signum)
            self._shutdown_event.set()

        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, signal_handler, signum)
            self._signals.append(signum)

    def _remove_signal_handlers(self) -> None:
        if not self._signals:
            return
        loop = asyncio.get_running_loop()
        for signum in self._signals:
            loop.remove_signal_handler(signum)
        self._signals = []

    @property
    def running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def tools(self) -> dict:
        """Get registered tools."""
        return self._tools.copy()

    async def health_check(self) -> dict:
        """
        Report server and store health.

        Returns:
            Health status information
        """
        status: Dict[str, Any] = {
            "server_running": self._running,
            "store_backend": self.config.store.backend,
            "store_connected": self.store.connected,
            "tools_registered": len(self._tools),
            "enabled_tools": list(self._tools.keys()),
            "prompts_registered": len(self.registry.prompt_names),
        }

        try:
            status["post_count"] = await self.store.count_posts()
            status["healthy"] = self._running and self.store.connected
        except PostStoreError as e:
            status["post_count"] = None
            status["healthy"] = False
            status["store_error"] = e.message

        return status
