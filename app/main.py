"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

import time

# Taken before the app and its dependencies are imported; /health reports uptime from here.
STARTED_AT = time.monotonic()

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.api.exception_handlers import setup_exception_handlers
from app.api.health import router as health_router
from app.api.middleware import register_middleware
from app.core.config import settings
from app.core.logging import configure_logging

configure_logging(settings)
logger = logging.getLogger(__name__)

if settings.uses_default_jwt_secret:
    logger.warning(
        "JWT_SECRET is not set; signing session tokens with the built-in default. "
        "Set JWT_SECRET before deploying."
    )

app = FastAPI(
    title="Acquisitions API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)
app.state.started_at = STARTED_AT

cors_origins = settings.CORS_ORIGINS or (["*"] if settings.APP_ENV == "dev" else [])
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_middleware(app)
setup_exception_handlers(app)

app.include_router(health_router, tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)
