# mindtrack backend api
# fastapi app with an in-memory record store and a langchain cbt classifier

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mindtrack.config import settings
from mindtrack.errors import register_exception_handlers
from mindtrack.services.store import store
from mindtrack.services.classifier import classifier
from mindtrack.services.cbt_session import registry
from mindtrack.routers import cbt, habits, journal, library, moods, users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: open the store, check classifier config. shutdown: drop sessions, close store."""
    logger.info("Starting MindTrack backend...")
    await store.open()
    if classifier.available:
        logger.info(f"CBT classifier ready (model: {classifier.model})")
    else:
        logger.error("GEMINI_API_KEY is not set, /cbt/analyze is disabled, sessions continue without suggestions")
    logger.info("MindTrack backend ready")
    yield
    logger.info("Shutting down MindTrack backend...")
    registry.clear()
    await store.close()


app = FastAPI(
    title="MindTrack API",
    description="Backend API for the MindTrack wellness app: CBT journaling with AI thought analysis, moods, habits, meditations",
    version="0.1.0",
    lifespan=lifespan,
)

# cors, allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# register routers
app.include_router(users.router)
app.include_router(journal.router)
app.include_router(cbt.router)
app.include_router(moods.router)
app.include_router(habits.router)
app.include_router(library.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "mindtrack-api"}
