"""Root greeting and health check endpoints."""

import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from app.schemas.health import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    """Root route; plain-text greeting."""
    logger.info("Hello from acquisitions api!")
    return "Hello from acquisitions api!"


@router.get("/health", response_model=HealthResponse)
def get_health(request: Request) -> HealthResponse:
    """
    Return service status, server time and uptime (seconds since app.main was first imported).
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(UTC).isoformat(),
        uptime=time.monotonic() - request.app.state.started_at,
    )
