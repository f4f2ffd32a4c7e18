"""Health check and system endpoints."""

from fastapi import APIRouter

from filmlog import __version__
from filmlog.api.deps import SettingsDep

router = APIRouter()


@router.get("/version")
async def get_version(settings: SettingsDep) -> dict[str, str]:
    """Get API version information."""
    return {
        "version": __version__,
        "api_version": settings.api_version,
        "environment": settings.environment,
    }
