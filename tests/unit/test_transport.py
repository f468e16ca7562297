"""
Unit tests for the stdio transport.
"""

import asyncio
import io
import json

import pytest

from llm_cms_mcp_server.protocol.schemas import MCPResponse
from llm_cms_mcp_server.protocol.transport import StdioTransport, TransportError


def _frames(stdout):
    return [json.loads(line) for line in stdout.getvalue().splitlines()]


def _transport(*lines):
    stdin = io.StringIO("".join(line + "\n" for line in lines))
    return StdioTransport(stdin=stdin, stdout=io.StringIO())


async def echo_handler(request):
    return MCPResponse(id=request.id, result={"method": request.method})


class TestStdioTransport:
    """Test newline-delimited JSON-RPC framing."""

    @pytest.mark.asyncio
    async def test_requires_handler(self):
        with pytest.raises(TransportError):
            await _transport().start()

    @pytest.mark.asyncio
    async def test_request_response(self):
        transport = _transport(json.dumps({"jsonrpc": "2.0", "id": 1, "method": "ping"}))
        transport.set_message_handler(echo_handler)

        await transport.start()

        assert _frames(transport.stdout) == [
            {"jsonrpc": "2.0", "id": 1, "result": {"method": "ping"}}
        ]
        assert not transport.running

    @pytest.mark.asyncio
    async def test_parse_error(self):
        transport = _transport("{not json")
        transport.set_message_handler(echo_handler)

        await transport.start()

        frame = _frames(transport.stdout)[0]
        assert frame["id"] is None
        assert frame["error"]["code"] == -32700

    @pytest.mark.asyncio
    async def test_non_object_message(self):
        transport = _transport("[1, 2]")
        transport.set_message_handler(echo_handler)

        await transport.start()

        assert _frames(transport.stdout)[0]["error"]["code"] == -32600

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_id", [True, None, 1.5, [1]])
    async def test_invalid_request_id(self, request_id):
        transport = _transport(json.dumps({"jsonrpc": "2.0", "id": request_id, "method": "ping"}))
        transport.set_message_handler(echo_handler)

        await transport.start()

        frames = _frames(transport.stdout)
        assert len(frames) == 1
        assert frames[0]["id"] is None
        assert frames[0]["error"]["code"] == -32600

    @pytest.mark.asyncio
    async def test_notifications_get_no_response(self):
        transport = _transport(
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            "",
            json.dumps({"jsonrpc": "2.0", "id": "a", "method": "ping"}),
        )
        transport.set_message_handler(echo_handler)

        await transport.start()

        frames = _frames(transport.stdout)
        assert len(frames) == 1
        assert frames[0]["id"] == "a"

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error(self):
        async def failing_handler(request):
            raise RuntimeError("boom")

        transport = _transport(json.dumps({"jsonrpc": "2.0", "id": 9, "method": "ping"}))
        transport.set_message_handler(failing_handler)

        await transport.start()

        frame = _frames(transport.stdout)[0]
        assert frame["id"] == 9
        assert frame["error"]["code"] == -32603

    @pytest.mark.asyncio
    async def test_concurrent_requests_answered_out_of_order(self):
        gate = asyncio.Event()

        async def gated_handler(request):
            if request.method == "slow":
                await gate.wait()
            else:
                gate.set()
            return MCPResponse(id=request.id, result={})

        transport = _transport(
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "slow"}),
            json.dumps({"jsonrpc": "2.0", "id": 2, "method": "fast"}),
        )
        transport.set_message_handler(gated_handler)

        await asyncio.wait_for(transport.start(), timeout=5)

        assert [frame["id"] for frame in _frames(transport.stdout)] == [2, 1]
        assert transport.pending_requests == 0

    @pytest.mark.asyncio
    async def test_eof_waits_for_in_flight_requests(self):
        async def slow_handler(request):
            await asyncio.sleep(0.05)
            return MCPResponse(id=request.id, result={})

        transport = _transport(
            *(json.dumps({"jsonrpc": "2.0", "id": i, "method": "ping"}) for i in range(5))
        )
        transport.set_message_handler(slow_handler)

        await transport.start()

        assert sorted(frame["id"] for frame in _frames(transport.stdout)) == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_full_server_round_trip(self, handler):
        transport = _transport(
            json.dumps(
                {
                    "jsonrpc": "2.0",
                    "id": 1,
                    "method": "tools/call",
                    "params": {
                        "name": "create_post",
                        "arguments": {"title": "Hola", "content": "Mundo"},
                    },
                }
            ),
        )
        transport.set_message_handler(handler.handle_request)

        await transport.start()

        frame = _frames(transport.stdout)[0]
        envelope = json.loads(frame["result"]["content"][0]["text"])
        assert frame["result"]["isError"] is False
        assert envelope["success"] is True
        assert envelope["message"] == "Post created successfully"
