"""
Health check routes.
"""

from fastapi import APIRouter

from gardien.di.container import get_container
from gardien.domain.exceptions import StorageUnavailableError
from gardien.infrastructure.persistence import RedisUserDirectory

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Report service and storage status."""
    container = get_container()
    directory = container.user_directory

    storage = {"backend": "memory", "status": "healthy"}
    if isinstance(directory, RedisUserDirectory):
        storage["backend"] = "redis"
        try:
            await directory.ping()
        except StorageUnavailableError as e:
            storage["status"] = "unhealthy"
            storage["error"] = e.message

    overall = "healthy" if storage["status"] == "healthy" else "degraded"
    return {
        "status": overall,
        "service": container.settings.APP_NAME,
        "version": container.settings.APP_VERSION,
        "components": {"storage": storage},
    }
