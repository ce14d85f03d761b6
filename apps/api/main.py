"""VidPipe API"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vidpipe.config import Settings
from vidpipe.repositories import DatabasePool
from vidpipe.utils.logging_setup import setup_logging
from routes.videos import router as videos_router
from services.pipeline_service import build_orchestrator

settings = Settings()
setup_logging(settings)
logger = logging.getLogger("vidpipe.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    app.state.db_pool = await DatabasePool.get_pool(settings)
    app.state.orchestrator = build_orchestrator(settings, app.state.db_pool)
    logger.info("API starting (outputs=%s)", settings.outputs_dir)
    try:
        yield
    finally:
        # Let encodes whose clients disconnected finish before the pool goes away.
        await app.state.orchestrator.drain()
        await DatabasePool.close()


app = FastAPI(
    title="VidPipe API",
    description="Video trim/merge pipeline API",
    version="0.1.0",
    lifespan=lifespan,
)


app.include_router(videos_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
