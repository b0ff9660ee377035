"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.api import auth

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])


@router.get("", response_class=PlainTextResponse, tags=["status"])
def api_status() -> str:
    """Plain-text liveness message for the API prefix."""
    return "Acquisitions api is running!"
