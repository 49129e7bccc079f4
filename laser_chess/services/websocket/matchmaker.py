import asyncio
import logging

from laser_chess.config import Settings, get_settings
from laser_chess.services.game.start_game import initialize_board

from .connection import PlayerConnection
from .session import GameSession

logger = logging.getLogger(__name__)


class Matchmaker:
    """Pairs connections that finished setup and runs a GameSession per pair.

    Connections are paired in arrival order; the first of a pair plays as
    Player 1. Connections that dropped while queued are skipped.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._queue: asyncio.Queue[PlayerConnection] = asyncio.Queue()
        self._sessions: set[asyncio.Task] = set()
        self._loop_task: asyncio.Task | None = None

        # Fail at startup rather than at the first pairing
        initialize_board(self._settings.STARTING_LAYOUT)

        logger.info(
            "Matchmaker initialized (turn_timeout=%.0fs, layout=%d pieces)",
            self._settings.WS_TURN_TIMEOUT,
            len(self._settings.STARTING_LAYOUT),
        )

    async def enqueue(self, connection: PlayerConnection) -> None:
        logger.info("Connection %s (%r) queued for matchmaking", connection.connection_id, connection.name)
        await self._queue.put(connection)

    async def start(self) -> None:
        """Start the matchmaking loop."""
        if self._loop_task is not None:
            logger.warning("Matchmaking loop already running")
            return
        self._loop_task = asyncio.create_task(self._matchmaking_loop())

    async def stop(self) -> None:
        """Stop matchmaking and cancel every running session."""
        tasks = list(self._sessions)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Matchmaker stopped, %d tasks cancelled", len(tasks))

    async def _matchmaking_loop(self) -> None:
        logger.info("Matchmaking loop started")
        waiting: PlayerConnection | None = None
        try:
            while True:
                connection = await self._queue.get()
                if not connection.connected:
                    logger.info("Skipping closed connection %s", connection.connection_id)
                    connection.finished.set()
                    continue

                if waiting is not None and not waiting.connected:
                    logger.info("Waiting connection %s left the queue", waiting.connection_id)
                    waiting.finished.set()
                    waiting = None

                if waiting is None:
                    waiting = connection
                    continue

                self._start_session(waiting, connection)
                waiting = None
        except asyncio.CancelledError:
            if waiting is not None:
                waiting.finished.set()
            logger.info("Matchmaking loop cancelled")
            raise

    def _start_session(self, first: PlayerConnection, second: PlayerConnection) -> None:
        session = GameSession(
            (first, second),
            board=initialize_board(self._settings.STARTING_LAYOUT),
            turn_timeout=self._settings.WS_TURN_TIMEOUT,
            max_message_size=self._settings.WS_MAX_MESSAGE_SIZE,
        )
        task = asyncio.create_task(self._run_session(session))
        self._sessions.add(task)
        task.add_done_callback(self._sessions.discard)

    async def _run_session(self, session: GameSession) -> None:
        try:
            await session.run()
        except Exception:
            # run() has already released both connections
            logger.exception("Session %s crashed", session.session_id)
            return

        for connection in session.unpaired:
            await self.enqueue(connection)


# Global matchmaker instance (initialized in lifespan)
_matchmaker: Matchmaker | None = None


def get_matchmaker() -> Matchmaker:
    """Get the global Matchmaker instance."""
    global _matchmaker
    if _matchmaker is None:
        _matchmaker = Matchmaker()
    return _matchmaker


def set_matchmaker(matchmaker: Matchmaker | None) -> None:
    """Set the global Matchmaker instance."""
    global _matchmaker
    _matchmaker = matchmaker
