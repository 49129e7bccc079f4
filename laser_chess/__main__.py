import uvicorn

from laser_chess.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "laser_chess.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
