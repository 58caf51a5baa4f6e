"""Health check router for the guess game."""

from fastapi import APIRouter

from guessgame.config import settings
from guessgame.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return {"status": "ok", "env": settings.app_env, "version": settings.app_version}
