import asyncio
import json
import logging
import uuid

from fastapi import WebSocket
from pydantic import BaseModel, ValidationError
from starlette.websockets import WebSocketState

from laser_chess.schemas.ws import (
    ClientRequest,
    InitialSetupRequest,
    WSCloseCode,
    build_request_from_payload,
)

logger = logging.getLogger(__name__)


class SessionClosed(Exception):
    """The peer went away; nothing more can be sent or received."""


class RequestError(Exception):
    """A frame arrived but could not be turned into a request."""

    def __init__(self, error_code: str, message: str):
        super().__init__(message)
        self.error_code = error_code
        self.message = message


class SetupError(Exception):
    """The setup handshake failed; the connection must be closed."""

    def __init__(self, reason: str, close_code: int = WSCloseCode.SETUP_FAILED):
        super().__init__(reason)
        self.reason = reason
        self.close_code = close_code


class PlayerConnection:
    """One player's link to the server.

    Subclasses provide the transport; everything above (setup, sessions,
    matchmaking) only talks to this interface.
    """

    def __init__(self, name: str = ""):
        self.connection_id = str(uuid.uuid4())
        self.name = name
        self.finished = asyncio.Event()

    @property
    def connected(self) -> bool:
        raise NotImplementedError

    async def send_json(self, data: dict) -> None:
        raise NotImplementedError

    async def receive_text(self) -> str:
        """Wait for the next text frame. Raises SessionClosed on disconnect."""
        raise NotImplementedError

    async def close(self, code: int = WSCloseCode.NORMAL) -> None:
        raise NotImplementedError

    async def send(self, message: BaseModel) -> None:
        await self.send_json(message.model_dump(mode="json", by_alias=True))


class WebSocketConnection(PlayerConnection):
    """PlayerConnection over a Starlette WebSocket."""

    def __init__(self, websocket: WebSocket, name: str = ""):
        super().__init__(name)
        self._websocket = websocket

    @property
    def connected(self) -> bool:
        return (
            self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_json(self, data: dict) -> None:
        if not self.connected:
            raise SessionClosed(f"Connection {self.connection_id} is closed")
        try:
            await self._websocket.send_json(data)
        except Exception as e:
            raise SessionClosed(f"Failed to send to {self.connection_id}: {e}") from e

    async def receive_text(self) -> str:
        if not self.connected:
            raise SessionClosed(f"Connection {self.connection_id} is closed")
        try:
            message = await self._websocket.receive()
        except Exception as e:
            raise SessionClosed(f"Failed to receive from {self.connection_id}: {e}") from e

        if message.get("type") == "websocket.disconnect":
            raise SessionClosed(f"Connection {self.connection_id} disconnected")

        text = message.get("text")
        if text is None:
            raw_bytes = message.get("bytes") or b""
            text = raw_bytes.decode("utf-8", errors="replace")
        return text

    async def close(self, code: int = WSCloseCode.NORMAL) -> None:
        if not self.connected:
            return
        try:
            await self._websocket.close(code=code)
        except Exception as e:
            logger.debug("Error closing websocket %s: %s", self.connection_id, e)


def parse_request(text: str, max_message_size: int) -> ClientRequest:
    """Turn a raw frame into a typed request.

    Raises:
        RequestError: If the frame is too large, not JSON, or not a known request.
    """
    size = len(text.encode("utf-8"))
    if size > max_message_size:
        raise RequestError(
            "MESSAGE_TOO_LARGE",
            f"Message exceeds maximum size of {max_message_size} bytes",
        )

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        raise RequestError("INVALID_JSON", "Invalid JSON format")

    if not isinstance(data, dict):
        raise RequestError("INVALID_MESSAGE", "Message must be a JSON object")

    try:
        return build_request_from_payload(data)
    except ValidationError as e:
        raise RequestError("INVALID_MESSAGE", str(e))
    except ValueError as e:
        raise RequestError("UNKNOWN_MESSAGE_TYPE", str(e))


async def await_initial_setup(
    connection: PlayerConnection,
    timeout: float,
    max_message_size: int,
) -> InitialSetupRequest:
    """Wait for the setup frame that must open every connection.

    Raises:
        SetupError: On timeout, disconnect, or any frame other than a valid setup.
    """
    try:
        async with asyncio.timeout(timeout):
            text = await connection.receive_text()
    except TimeoutError:
        raise SetupError("Timed out waiting for setup", WSCloseCode.SETUP_TIMEOUT)
    except SessionClosed:
        raise SetupError("Connection closed during setup", WSCloseCode.GOING_AWAY)

    try:
        request = parse_request(text, max_message_size)
    except RequestError as e:
        raise SetupError(f"Invalid setup message: {e.error_code}")

    if not isinstance(request, InitialSetupRequest):
        raise SetupError("Expected initial_setup message, got different message")

    logger.info("Player %r completed setup on connection %s", request.player_name, connection.connection_id)
    return request
