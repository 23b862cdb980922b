import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from scribe.database import close_db, init_db
from scribe.routers import transcriptions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Scribe...")
    await init_db()
    logger.info("Database initialized")
    yield
    await close_db()
    logger.info("Scribe shut down")


app = FastAPI(
    title="Scribe",
    description="Audio upload, chunked speech-to-text and transcript history",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(transcriptions.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
