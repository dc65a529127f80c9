"""
API Dependencies - Service container access for FastAPI endpoints

The ServiceContainer is attached to the app by create_app() and read back
from `request.app.state`, so every app instance (and every test) carries
its own registry.

Example:
    @router.get("/api/endpoints")
    async def list_endpoints(services: ServiceContainer = Depends(get_service_container)):
        return services.registry.snapshot()
"""

from fastapi import Depends, HTTPException, Request, status

from neodictate.api.services.dictate_dispatcher import DictateDispatcher
from neodictate.services.service_container import ServiceContainer


async def get_service_container(request: Request) -> ServiceContainer:
    """
    FastAPI dependency for accessing the service container.

    Raises:
        HTTPException: 503 Service Unavailable if no container is attached
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service container not initialized. Server may still be starting."
        )
    return services


async def get_dispatcher(
    services: ServiceContainer = Depends(get_service_container)
) -> DictateDispatcher:
    """Dependency to get a dispatcher over the app's registry and palette."""
    return DictateDispatcher(registry=services.registry, palette=services.palette)
