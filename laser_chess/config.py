import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from laser_chess.schemas.game_engine import PlacedPiece

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App config
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    DEBUG: bool = False

    # WebSocket config
    WS_SETUP_TIMEOUT: float = 60.0
    WS_TURN_TIMEOUT: float = 600.0
    WS_MAX_MESSAGE_SIZE: int = 64 * 1024

    # Extra starting pieces from Player 1's side (JSON), mirrored for Player 2
    STARTING_LAYOUT: list[PlacedPiece] = []

    @field_validator("WS_SETUP_TIMEOUT", "WS_TURN_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    @field_validator("WS_MAX_MESSAGE_SIZE")
    @classmethod
    def validate_message_size(cls, v: int) -> int:
        if v < 1024:
            raise ValueError("WS_MAX_MESSAGE_SIZE must be at least 1024 bytes")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug("Listening on %s:%d", settings.HOST, settings.PORT)
    logger.debug("Starting layout: %d extra pieces per player", len(settings.STARTING_LAYOUT))
    return settings
