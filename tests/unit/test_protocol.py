"""
Unit tests for MCP protocol implementation.
"""

import pytest
from pydantic import ValidationError
from unittest.mock import AsyncMock

from llm_cms_mcp_server.protocol.handlers import MCPHandler
from llm_cms_mcp_server.protocol.registry import CapabilityRegistry
from llm_cms_mcp_server.protocol.schemas import (
    MCPInitializeRequest,
    MCPListToolsRequest,
    MCPRequest,
    MCPResponse,
    Tool,
    ToolParameter,
    ToolSchema,
)
from llm_cms_mcp_server.tools.base import ToolResult


class EchoTool:
    """Minimal tool double exposing the registry interface."""

    def __init__(self):
        self.calls = AsyncMock(return_value=ToolResult.success(echo="hello"))

    def get_schema(self):
        return Tool(
            name="echo",
            description="Echo a message",
            inputSchema=ToolSchema(
                type="object",
                properties={"message": ToolParameter(type="string", description="Message")},
                required=["message"],
            ),
        )

    async def __call__(self, arguments):
        return await self.calls(arguments)


class TestMCPHandler:
    """Test MCP protocol handler with a bare registry."""

    @pytest.fixture
    def registry(self):
        return CapabilityRegistry()

    @pytest.fixture
    def bare_handler(self, registry):
        return MCPHandler(registry=registry)

    @pytest.mark.asyncio
    async def test_handle_initialize(self, bare_handler):
        request = MCPInitializeRequest(
            id="test-1",
            params={
                "protocolVersion": "2024-11-05",
                "clientInfo": {"name": "test-client", "version": "1.0.0"},
                "capabilities": {},
            },
        )

        response = await bare_handler.handle_request(request)

        assert response.id == "test-1"
        assert response.result["protocolVersion"] == "2024-11-05"
        assert response.result["serverInfo"]["name"] == "llm-cms-server"
        assert set(response.result["capabilities"]) == {"tools", "resources", "prompts"}

    @pytest.mark.asyncio
    async def test_list_tools_without_initialize(self, bare_handler, registry):
        registry.register_tool(EchoTool())

        response = await bare_handler.handle_request(MCPListToolsRequest(id="test-1"))

        assert response.error is None
        assert response.result["tools"][0]["name"] == "echo"
        assert response.result["tools"][0]["inputSchema"]["required"] == ["message"]

    @pytest.mark.asyncio
    async def test_call_tool_passes_raw_arguments(self, bare_handler, registry):
        tool = EchoTool()
        registry.register_tool(tool)

        response = await bare_handler.handle_request(
            MCPRequest(
                id=7,
                method="tools/call",
                params={"name": "echo", "arguments": {"message": "hello"}},
            )
        )

        assert response.id == 7
        assert response.result["isError"] is False
        tool.calls.assert_called_once_with({"message": "hello"})

    @pytest.mark.asyncio
    async def test_unexpected_tool_exception_is_soft(self, bare_handler, registry):
        tool = EchoTool()
        tool.calls.side_effect = RuntimeError("boom")
        registry.register_tool(tool)

        response = await bare_handler.handle_request(
            MCPRequest(id=1, method="tools/call", params={"name": "echo", "arguments": {}})
        )

        assert response.error is None
        assert response.result["isError"] is True
        assert "boom" in response.result["content"][0]["text"]

    @pytest.mark.asyncio
    async def test_handle_unknown_method(self, bare_handler):
        request = MCPRequest(id="test-1", method="unknown_method", params={})

        response = await bare_handler.handle_request(request)

        assert response.error["code"] == -32601
        assert "unknown_method" in response.error["message"]

    @pytest.mark.asyncio
    async def test_ping(self, bare_handler):
        response = await bare_handler.handle_request(MCPRequest(id=3, method="ping"))

        assert response.model_dump() == {"jsonrpc": "2.0", "id": 3, "result": {}}

    @pytest.mark.asyncio
    async def test_resources_without_provider(self, bare_handler):
        listing = await bare_handler.handle_request(MCPRequest(id=1, method="resources/list"))
        read = await bare_handler.handle_request(
            MCPRequest(id=2, method="resources/read", params={"uri": "post://abc"})
        )

        assert listing.result == {"resources": []}
        assert read.error["code"] == -32601

    def test_duplicate_tool_registration(self, registry):
        registry.register_tool(EchoTool())

        with pytest.raises(ValueError):
            registry.register_tool(EchoTool())


class TestResponseSerialization:
    """Test JSON-RPC response shape."""

    def test_error_response_drops_result(self):
        response = MCPResponse(id=1, error={"code": -32601, "message": "nope"})

        assert response.model_dump() == {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32601, "message": "nope"},
        }

    def test_success_response_drops_error(self):
        response = MCPResponse(id="a", result={"ok": True})

        assert "error" not in response.model_dump()


class TestDispatch:
    """Test request routing against the full server catalog."""

    @pytest.mark.asyncio
    async def test_list_tools(self, send):
        response = await send("tools/list")

        names = [tool["name"] for tool in response.result["tools"]]
        assert names == ["create_post", "list_posts", "get_post", "update_post", "delete_post"]
        create = response.result["tools"][0]
        assert create["inputSchema"]["additionalProperties"] is False
        assert "enum" not in create["inputSchema"]["properties"]["title"]

    @pytest.mark.asyncio
    async def test_unknown_tool_never_reaches_store(self, send, store):
        store.recent_posts = AsyncMock()
        store.insert_post = AsyncMock()

        response = await send("tools/call", {"name": "frobnicate", "arguments": {}})

        assert response.error["code"] == -32601
        assert response.error["message"] == "Unknown tool: frobnicate"
        store.recent_posts.assert_not_called()
        store.insert_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_tool_name(self, send):
        response = await send("tools/call", {"arguments": {}})

        assert response.error["code"] == -32602

    @pytest.mark.asyncio
    async def test_missing_params(self, send):
        response = await send("tools/call")

        assert response.error["code"] == -32602

    @pytest.mark.asyncio
    async def test_missing_required_argument_writes_nothing(self, send, store):
        response = await send("tools/call", {"name": "create_post", "arguments": {"title": "T"}})

        assert response.error["code"] == -32602
        assert "content" in response.error["message"]
        assert await store.count_posts() == 0

    @pytest.mark.asyncio
    async def test_non_object_arguments(self, send):
        response = await send("tools/call", {"name": "get_post", "arguments": "abc"})

        assert response.error["code"] == -32602

    @pytest.mark.asyncio
    async def test_disabled_tool_is_unknown(self, test_config, store):
        from llm_cms_mcp_server.server import LLMCMSMCPServer

        test_config.tools.delete_post.enabled = False
        mcp_server = LLMCMSMCPServer(test_config, store=store)
        await mcp_server.start()
        try:
            response = await mcp_server.mcp_handler.handle_request(
                MCPRequest(
                    id=1,
                    method="tools/call",
                    params={"name": "delete_post", "arguments": {"id": "x"}},
                )
            )
        finally:
            await mcp_server.stop()

        assert response.error["code"] == -32601
        assert "delete_post" not in mcp_server.tools


class TestRequestParsing:
    """Test JSON-RPC request validation."""

    def test_boolean_id_rejected(self):
        with pytest.raises(ValidationError):
            MCPRequest(id=True, method="ping")

    def test_string_and_integer_ids(self):
        assert MCPRequest(id="abc", method="ping").id == "abc"
        assert MCPRequest(id=0, method="ping").id == 0
