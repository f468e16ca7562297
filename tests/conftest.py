"""
Pytest configuration and fixtures for LLM CMS MCP Server tests.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from llm_cms_mcp_server.client.memory_store import InMemoryPostStore
from llm_cms_mcp_server.config.settings import Config, ServerConfig, StoreConfig, ToolsConfig
from llm_cms_mcp_server.protocol.schemas import MCPRequest
from llm_cms_mcp_server.server import LLMCMSMCPServer


class FakeClock:
    """Deterministic clock advancing a fixed step on every reading."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or datetime(2025, 11, 1, 10, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return Config(
        version="1.0.0-test",
        store=StoreConfig(backend="memory", db_name="chatcms-test"),
        server=ServerConfig(log_level="DEBUG"),
        tools=ToolsConfig(),
    )


@pytest.fixture
async def store(clock):
    """Create a connected in-memory post store."""
    post_store = InMemoryPostStore(clock=clock)
    await post_store.connect()
    yield post_store
    await post_store.disconnect()


@pytest.fixture
async def server(test_config, store):
    """Create a started server backed by the in-memory store."""
    mcp_server = LLMCMSMCPServer(test_config, store=store)
    await mcp_server.start()
    yield mcp_server
    await mcp_server.stop()


@pytest.fixture
def handler(server):
    return server.mcp_handler


@pytest.fixture
def send(handler):
    """Send a request through the protocol handler."""

    async def _send(method, params=None, request_id=1):
        return await handler.handle_request(
            MCPRequest(id=request_id, method=method, params=params)
        )

    return _send


@pytest.fixture
def call_tool(send):
    """Call a tool and decode its JSON envelope."""

    async def _call(name, arguments=None, request_id=1):
        response = await send(
            "tools/call", {"name": name, "arguments": arguments or {}}, request_id
        )
        assert response.error is None, response.error
        envelope = json.loads(response.result["content"][0]["text"])
        assert response.result["isError"] is (not envelope["success"])
        return envelope

    return _call
