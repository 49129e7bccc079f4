from laser_chess.services.websocket.connection import (
    PlayerConnection,
    SessionClosed,
    SetupError,
    WebSocketConnection,
    await_initial_setup,
)
from laser_chess.services.websocket.matchmaker import Matchmaker, get_matchmaker, set_matchmaker
from laser_chess.services.websocket.session import GameSession

__all__ = [
    "GameSession",
    "Matchmaker",
    "PlayerConnection",
    "SessionClosed",
    "SetupError",
    "WebSocketConnection",
    "await_initial_setup",
    "get_matchmaker",
    "set_matchmaker",
]
