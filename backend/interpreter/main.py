"""
Real-Time Interpreter Backend - Main Application

This is the entry point for the FastAPI application.
It handles:
- REST API endpoints (languages, stats)
- WebSocket connections for simultaneous interpretation
- Optional Prometheus metrics server
"""
from contextlib import asynccontextmanager
import logging
from datetime import datetime, UTC

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interpreter.api import router as api_router
from interpreter.api.websocket import router as ws_router
from interpreter.config.constants import METRICS_SERVER_PORT
from interpreter.config.settings import settings
from interpreter.services.metrics import start_metrics_server
from interpreter.services.session.orchestrator import (
    get_active_connection_count,
    get_active_session_count,
)
from interpreter.services.translation import get_translator

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # === STARTUP ===
    logger.info("🚀 Starting Real-Time Interpreter Backend...")

    if get_translator() is not None:
        logger.info("✅ Translation backend configured")
    else:
        logger.info("⚠️ No translation backend, sentences will be spoken untranslated")

    if settings.METRICS_ENABLED:
        start_metrics_server(port=METRICS_SERVER_PORT)

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🛑 Shutting down...")


app = FastAPI(
    title="Real-Time Interpreter Backend",
    description="Streaming transcript segmentation, translation and ordered speech output",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include REST API routes
app.include_router(api_router, prefix="/api")

# Include WebSocket routes
app.include_router(ws_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Real-Time Interpreter",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "active_sessions": get_active_session_count(),
        "total_connections": get_active_connection_count()
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
