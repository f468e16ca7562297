"""
Transport layer for MCP protocol communication.

Implements the newline-delimited JSON-RPC stdio transport used by MCP
hosts.
"""

import asyncio
import json
import sys
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Set, TextIO, Union

import structlog
from pydantic import ValidationError

from .schemas import MCPMessage, MCPNotification, MCPRequest, MCPResponse

logger = structlog.get_logger(__name__)

MessageHandler = Union[
    Callable[[MCPRequest], MCPResponse],
    Callable[[MCPRequest], Awaitable[MCPResponse]],
]


class TransportError(Exception):
    """Base exception for transport errors."""


class StdioTransport:
    """
    Stdio transport for MCP communication.

    Each request is dispatched as its own task, so several requests can be
    in flight at once and responses are written as they complete. Writes
    are serialized so frames never interleave. On EOF the transport waits
    for every dispatched request to be answered before returning.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin
        self._stdout = stdout
        self._running = False
        self._message_handler: Optional[MessageHandler] = None
        self._tasks: Set[asyncio.Task] = set()
        self._write_lock: Optional[asyncio.Lock] = None

    @property
    def stdin(self) -> TextIO:
        return self._stdin or sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    def set_message_handler(self, handler: MessageHandler) -> None:
        """Set the message handler for incoming requests."""
        self._message_handler = handler

    async def start(self) -> None:
        """Run the stdio transport loop until EOF or ``stop()``."""
        if self._running:
            raise TransportError("Transport is already running")

        if not self._message_handler:
            raise TransportError("Message handler not set")

        self._running = True
        self._write_lock = asyncio.Lock()
        logger.info("Starting stdio transport")

        try:
            await self._run_transport_loop()
        except Exception as e:
            logger.error("Transport loop error", error=str(e), exc_info=True)
            raise
        finally:
            self._running = False
            logger.info("Stdio transport stopped")

    async def stop(self) -> None:
        """Stop reading new messages."""
        self._running = False

    async def drain(self) -> None:
        """Wait until every dispatched request has been answered."""
        if self._tasks:
            logger.info("Waiting for in-flight requests", pending=len(self._tasks))
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending_requests(self) -> int:
        return len(self._tasks)

    async def send_message(self, message: MCPMessage) -> None:
        """
        Send a message via stdout.

        Args:
            message: Message to send
        """
        try:
            message_json = json.dumps(
                message.model_dump(), separators=(",", ":"), ensure_ascii=False, default=str
            )

            async with self._write_lock:
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, self._write_stdout_sync, message_json)

            logger.debug("Sent message", message_type=type(message).__name__)

        except Exception as e:
            logger.error("Failed to send message", error=str(e), exc_info=True)
            raise TransportError(f"Failed to send message: {e}")

    def _write_stdout_sync(self, message_json: str) -> None:
        """Synchronous stdout write with immediate flush."""
        self.stdout.write(message_json + "\n")
        self.stdout.flush()

    async def send_response(self, response: MCPResponse) -> None:
        """Send a response message."""
        logger.debug(
            "Sending MCP response",
            response_id=response.id,
            has_result=response.result is not None,
            has_error=response.error is not None,
        )
        await self.send_message(response)

    async def send_notification(self, notification: MCPNotification) -> None:
        """Send a notification message."""
        await self.send_message(notification)

    async def _run_transport_loop(self) -> None:
        """Main transport loop for processing stdin messages."""
        logger.debug("Starting transport loop")

        async for line in self._read_stdin_lines():
            if not self._running:
                break

            try:
                await self._process_line(line)
            except Exception as e:
                logger.error("Error processing line", error=str(e), line=line[:100])

        await self.drain()

    async def _read_stdin_lines(self) -> AsyncIterator[str]:
        """Async generator for reading lines from stdin."""
        loop = asyncio.get_running_loop()

        while self._running:
            try:
                line = await loop.run_in_executor(None, self.stdin.readline)
            except Exception as e:
                logger.error("Error reading from stdin", error=str(e))
                break

            if not line:  # EOF
                logger.info("Received EOF on stdin")
                break

            line = line.strip()
            if line:
                yield line

    async def _process_line(self, line: str) -> None:
        """
        Process a single line from stdin.

        Requests are scheduled as tasks; this method does not wait for
        them to complete.

        Args:
            line: JSON line to process
        """
        try:
            message_data = json.loads(line)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON received", error=str(e), line=line[:100])
            await self._send_error(None, -32700, "Parse error")
            return

        logger.debug("Received message", message_data=message_data)

        if not isinstance(message_data, dict):
            await self._send_error(None, -32600, "Invalid Request")
            return

        if "method" in message_data:
            if "id" in message_data:
                self._dispatch(message_data)
            else:
                await self._handle_notification(message_data)
        else:
            logger.warning("Received response in server mode", message_data=message_data)

    def _dispatch(self, message_data: Dict[str, Any]) -> None:
        """Schedule a request task and track it until it completes."""
        task = asyncio.create_task(self._handle_request(message_data))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle_request(self, message_data: Dict[str, Any]) -> None:
        """Handle incoming request message."""
        request_id = message_data.get("id")
        if not isinstance(request_id, (str, int)) or isinstance(request_id, bool):
            logger.error("Invalid request id", request_id=request_id)
            await self._send_error(None, -32600, "Invalid Request: id must be a string or integer")
            return

        try:
            request = MCPRequest(**message_data)
        except ValidationError as e:
            logger.error("Invalid request format", error=str(e))
            await self._send_error(request_id, -32600, f"Invalid Request: {e}")
            return

        logger.info(
            "Processing request",
            method=request.method,
            request_id=request.id,
        )

        response = await self._safe_call_handler(request)
        try:
            await self.send_response(response)
        except TransportError as e:
            logger.error("Dropped response", request_id=request.id, error=str(e))

    async def _handle_notification(self, message_data: Dict[str, Any]) -> None:
        """Handle incoming notification message."""
        try:
            notification = MCPNotification(**message_data)
        except ValidationError as e:
            logger.error("Invalid notification format", error=str(e))
            return

        logger.info("Received notification", method=notification.method)

    async def _safe_call_handler(self, request: MCPRequest) -> MCPResponse:
        """Safely call the message handler with error handling."""
        try:
            result = self._message_handler(request)
            if asyncio.iscoroutine(result):
                return await result
            return result

        except Exception as e:
            logger.error("Handler error", error=str(e), exc_info=True)
            return self._create_error_response(request.id, -32603, f"Internal error: {e}")

    def _create_error_response(
        self,
        request_id: Any,
        code: int,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> MCPResponse:
        """Create an error response."""
        error: Dict[str, Any] = {"code": code, "message": message}
        if data:
            error["data"] = data
        return MCPResponse(id=request_id, error=error)

    async def _send_error(self, request_id: Any, code: int, message: str) -> None:
        await self.send_response(self._create_error_response(request_id, code, message))
