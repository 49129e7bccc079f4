import logging

from fastapi import APIRouter, WebSocket

from laser_chess.config import get_settings
from laser_chess.schemas.ws import WSCloseCode
from laser_chess.services.websocket.connection import (
    SetupError,
    WebSocketConnection,
    await_initial_setup,
)
from laser_chess.services.websocket.matchmaker import get_matchmaker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


@router.websocket("/game")
async def game_endpoint(websocket: WebSocket):
    """WebSocket endpoint for playing a game.

    Clients connect with: ws://host/game

    The first frame must be an initial_setup message carrying the player's
    name. The connection is then queued for matchmaking and stays open until
    its game session ends.
    """
    settings = get_settings()

    await websocket.accept()
    connection = WebSocketConnection(websocket)
    logger.info("New WebSocket connection %s, awaiting setup", connection.connection_id)

    try:
        setup = await await_initial_setup(
            connection,
            timeout=settings.WS_SETUP_TIMEOUT,
            max_message_size=settings.WS_MAX_MESSAGE_SIZE,
        )
    except SetupError as e:
        logger.warning("Setup failed for connection %s: %s", connection.connection_id, e.reason)
        await connection.close(code=e.close_code)
        return

    connection.name = setup.player_name
    await get_matchmaker().enqueue(connection)

    try:
        await connection.finished.wait()
    finally:
        await connection.close(code=WSCloseCode.NORMAL)
        logger.info("Connection %s closed", connection.connection_id)
