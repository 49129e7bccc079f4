"""A single game between two paired connections.

The session task owns its board: it only ever waits on the player whose
turn it is, so moves are applied strictly alternately and one at a time.
Frames sent by the other player meanwhile stay buffered on its connection
and are read as its move once its turn comes.
"""

import asyncio
import logging
import uuid

from laser_chess.schemas.game_engine import Board, Player
from laser_chess.schemas.ws import (
    GameErrorMessage,
    GameOverMessage,
    GameOverReason,
    InitialSetupMessage,
    MoveAcceptedMessage,
    MoveRejectedMessage,
    MoveRequest,
    OpponentMovedMessage,
    ServerMessage,
)
from laser_chess.services.game.engine import get_winner, is_game_over, process_move
from laser_chess.services.game.notation import describe_move, render_board

from .connection import PlayerConnection, RequestError, SessionClosed, parse_request

logger = logging.getLogger(__name__)


class PlayerDisconnected(Exception):
    def __init__(self, player: Player):
        super().__init__(f"Player {player.index} disconnected")
        self.player = player


class TurnTimedOut(Exception):
    def __init__(self, player: Player):
        super().__init__(f"Player {player.index} ran out of time")
        self.player = player


class GameSession:
    """Runs one game from setup to game over."""

    def __init__(
        self,
        players: tuple[PlayerConnection, PlayerConnection],
        board: Board,
        turn_timeout: float,
        max_message_size: int,
    ):
        self.session_id = str(uuid.uuid4())[:8]
        self.board = board
        self.current_player = Player.PLAYER_1
        self.winner: Player | None = None
        self.reason: GameOverReason | None = None
        self.started = False
        # Connections that never got to play and can be paired again
        self.unpaired: list[PlayerConnection] = []

        self._connections = {
            Player.PLAYER_1: players[0],
            Player.PLAYER_2: players[1],
        }
        self._turn_timeout = turn_timeout
        self._max_message_size = max_message_size

    def connection(self, player: Player) -> PlayerConnection:
        return self._connections[player]

    async def run(self) -> Player | None:
        """Play the game to the end and return the winner, if any."""
        logger.info(
            "Session %s: starting game between %r and %r",
            self.session_id,
            self.connection(Player.PLAYER_1).name,
            self.connection(Player.PLAYER_2).name,
        )
        try:
            await self._send_setup()
            self.started = True

            while not is_game_over(self.board):
                await self._play_turn(self.current_player)
                self.current_player = self.current_player.opponent()

            self.winner = get_winner(self.board)
            await self._end(GameOverReason.KING_DESTROYED)

        except PlayerDisconnected as e:
            remaining = e.player.opponent()
            if not self.started:
                logger.info(
                    "Session %s: player %d left before the game started",
                    self.session_id,
                    e.player.index,
                )
                self.unpaired.append(self.connection(remaining))
            else:
                logger.info("Session %s: player %d disconnected", self.session_id, e.player.index)
                self.winner = remaining
                await self._end(GameOverReason.OPPONENT_DISCONNECTED, only=remaining)

        except TurnTimedOut as e:
            logger.info("Session %s: player %d timed out", self.session_id, e.player.index)
            self.winner = e.player.opponent()
            await self._end(GameOverReason.TIMEOUT)

        finally:
            for connection in self._connections.values():
                if connection not in self.unpaired:
                    connection.finished.set()

        return self.winner

    async def _send_setup(self) -> None:
        for player in Player:
            await self._send(
                player,
                InitialSetupMessage(
                    board=self.board,
                    player_order=player.index,
                    opponent_name=self.connection(player.opponent()).name,
                ),
            )

    async def _play_turn(self, player: Player) -> None:
        """Wait until the player submits an accepted move, then apply it."""
        try:
            async with asyncio.timeout(self._turn_timeout):
                while True:
                    if await self._try_move(player):
                        return
        except TimeoutError:
            raise TurnTimedOut(player)

    async def _try_move(self, player: Player) -> bool:
        text = await self._receive(player)
        try:
            request = parse_request(text, self._max_message_size)
        except RequestError as e:
            logger.warning(
                "Session %s: bad frame from player %d: %s",
                self.session_id,
                player.index,
                e.error_code,
            )
            await self._send(player, GameErrorMessage(error_code=e.error_code, message=e.message))
            return False

        if not isinstance(request, MoveRequest):
            logger.warning(
                "Session %s: expected move from player %d, got %s",
                self.session_id,
                player.index,
                request.type,
            )
            await self._send(
                player,
                GameErrorMessage(
                    error_code="UNEXPECTED_MESSAGE",
                    message="Expected a move message",
                ),
            )
            return False

        result = process_move(self.board, request.move, player)
        if not result.success:
            logger.warning(
                "Session %s: invalid move from player %d: %s",
                self.session_id,
                player.index,
                result.error_message,
            )
            await self._send(
                player,
                MoveRejectedMessage(error_code=result.error_code, message=result.error_message),
            )
            return False

        self.board = result.board
        logger.info(
            "Session %s: player %d played %s",
            self.session_id,
            player.index,
            describe_move(request.move),
        )
        logger.debug("Session %s board:\n%s", self.session_id, render_board(self.board))

        await self._send(player, MoveAcceptedMessage(move=request.move, laser=result.laser))
        await self._send(
            player.opponent(),
            OpponentMovedMessage(move=request.move, laser=result.laser),
        )
        return True

    async def _end(self, reason: GameOverReason, only: Player | None = None) -> None:
        self.reason = reason
        message = GameOverMessage(winner=self.winner, reason=reason)
        recipients = [only] if only is not None else list(Player)
        for player in recipients:
            try:
                await self._send(player, message)
            except PlayerDisconnected:
                logger.debug("Session %s: could not send game over to player %d", self.session_id, player.index)
        logger.info(
            "Session %s: game over, winner=%s, reason=%s",
            self.session_id,
            self.winner.index if self.winner is not None else None,
            reason.value,
        )

    async def _send(self, player: Player, message: ServerMessage) -> None:
        try:
            await self.connection(player).send(message)
        except SessionClosed:
            raise PlayerDisconnected(player)

    async def _receive(self, player: Player) -> str:
        try:
            return await self.connection(player).receive_text()
        except SessionClosed:
            raise PlayerDisconnected(player)
