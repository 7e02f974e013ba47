"""Pickup API: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pickup_api import config
from pickup_api.routes import analyze, coil, magnet, response, transformer
from pickup_engine import MODEL_VERSION, __version__

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    app.state.sweep = config.sweep_defaults()
    logger.info("Pickup engine %s (model %s), default sweep %s", __version__, MODEL_VERSION, app.state.sweep)
    yield


app = FastAPI(
    title="Pickup API",
    description="Physics model for electromagnetic guitar and bass pickups",
    version=__version__,
    lifespan=lifespan,
)

# CORS: allow frontend origins
_frontend_url = config.frontend_url()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route modules
app.include_router(coil.router, prefix="/api", tags=["Coil"])
app.include_router(magnet.router, prefix="/api", tags=["Magnet"])
app.include_router(transformer.router, prefix="/api", tags=["Transformer"])
app.include_router(response.router, prefix="/api", tags=["Response"])
app.include_router(analyze.router, prefix="/api", tags=["Analyze"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "pickup-api", "model_version": MODEL_VERSION}
