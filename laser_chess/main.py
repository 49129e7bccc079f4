import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from laser_chess.config import get_settings
from laser_chess.routers import ws
from laser_chess.services.websocket.matchmaker import Matchmaker, set_matchmaker

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Laser Chess server")
    logger.debug("Debug mode: %s", settings.DEBUG)

    # Fresh matchmaker per lifespan so its queue lives on the serving loop
    matchmaker = Matchmaker(settings)
    set_matchmaker(matchmaker)
    await matchmaker.start()
    logger.info("Matchmaker started")

    yield

    logger.info("Shutting down Laser Chess server")
    await matchmaker.stop()
    set_matchmaker(None)
    logger.info("Matchmaker cleanup complete")


app = FastAPI(
    title="Laser Chess",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.debug("CORS configured with origins: %s", settings.CORS_ORIGINS)

app.include_router(ws.router)
logger.debug("Routers registered: /game")


@app.get("/")
def root():
    return {"message": "Laser Chess"}


@app.get("/health")
def health():
    return {"status": "healthy"}
