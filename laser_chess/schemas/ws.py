from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from laser_chess.schemas.game_engine import Board, LaserOutcome, Move, Player


class MessageType(str, Enum):
    """WebSocket message types."""

    # Setup
    INITIAL_SETUP = "initial_setup"

    # Game
    MOVE = "move"
    MOVE_ACCEPTED = "move_accepted"
    MOVE_REJECTED = "move_rejected"
    OPPONENT_MOVED = "opponent_moved"
    GAME_ERROR = "game_error"
    GAME_OVER = "game_over"


class WSCloseCode:
    """WebSocket close codes (RFC 6455 + custom)."""

    # Standard RFC 6455 codes
    NORMAL = 1000
    GOING_AWAY = 1001
    PROTOCOL_ERROR = 1002
    INVALID_DATA = 1007
    POLICY_VIOLATION = 1008
    MESSAGE_TOO_BIG = 1009
    INTERNAL_ERROR = 1011

    # Custom application codes (4000-4999)
    SETUP_FAILED = 4001
    SETUP_TIMEOUT = 4002


class GameOverReason(str, Enum):
    KING_DESTROYED = "king_destroyed"
    OPPONENT_DISCONNECTED = "opponent_disconnected"
    TIMEOUT = "timeout"


# --- Client -> server ---


class InitialSetupRequest(BaseModel):
    """First message on every connection."""

    type: Literal["initial_setup"] = "initial_setup"
    player_name: str = Field(..., min_length=1, max_length=32)


class MoveRequest(BaseModel):
    """One move for the current turn."""

    type: Literal["move"] = "move"
    move: Move


ClientRequest = Annotated[
    InitialSetupRequest | MoveRequest,
    Field(discriminator="type"),
]


def build_request_from_payload(payload: dict[str, Any]) -> ClientRequest:
    """Build a typed request from a raw payload dict.

    Raises:
        ValueError: If type is missing or unknown.
        pydantic.ValidationError: If the fields do not match the request type.
    """
    request_type = payload.get("type")

    if request_type == MessageType.INITIAL_SETUP.value:
        return InitialSetupRequest.model_validate(payload)
    elif request_type == MessageType.MOVE.value:
        return MoveRequest.model_validate(payload)
    else:
        raise ValueError(f"Unknown request type: {request_type}")


# --- Server -> client ---


class InitialSetupMessage(BaseModel):
    """Sent to both players once they are paired."""

    type: Literal["initial_setup"] = "initial_setup"
    board: Board
    player_order: int = Field(..., ge=0, le=1, description="0 moves first")
    opponent_name: str


class OpponentMovedMessage(BaseModel):
    type: Literal["opponent_moved"] = "opponent_moved"
    move: Move
    laser: LaserOutcome


class MoveAcceptedMessage(BaseModel):
    type: Literal["move_accepted"] = "move_accepted"
    move: Move
    laser: LaserOutcome


class MoveRejectedMessage(BaseModel):
    """The move broke a rule; the player may submit another one."""

    type: Literal["move_rejected"] = "move_rejected"
    error_code: str
    message: str


class GameErrorMessage(BaseModel):
    """The frame could not be used (bad JSON, wrong shape, wrong phase)."""

    type: Literal["game_error"] = "game_error"
    error_code: str
    message: str


class GameOverMessage(BaseModel):
    type: Literal["game_over"] = "game_over"
    winner: Player | None = None
    reason: GameOverReason


ServerMessage = Annotated[
    InitialSetupMessage
    | OpponentMovedMessage
    | MoveAcceptedMessage
    | MoveRejectedMessage
    | GameErrorMessage
    | GameOverMessage,
    Field(discriminator="type"),
]
