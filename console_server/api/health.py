"""Health check endpoints."""

from fastapi import APIRouter, Request

from .. import __version__
from ..auth import is_auth_enabled
from ..monitor import is_overloaded

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    return {"status": "ok", "clients": len(request.app.state.registry)}


@router.get("/")
async def root(request: Request):
    """Root endpoint."""
    return {
        "service": "console-server",
        "version": __version__,
        "status": "running",
        "auth": is_auth_enabled(request.app.state.config.auth),
    }


@router.get("/system")
async def system(request: Request):
    """Latest host snapshot, refreshed on request."""
    sampler = request.app.state.sampler
    snapshot = await sampler.refresh_async()
    return {
        "healthy": not is_overloaded(snapshot),
        "sampled_at": sampler.sampled_at,
        **snapshot.to_dict(),
    }
