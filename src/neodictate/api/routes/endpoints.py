"""
Endpoint listing - read-only view of the registry for operators and the web UI
"""

from fastapi import APIRouter, Depends

from neodictate.api.dependencies import get_service_container
from neodictate.api.schemas.dictate import EndpointListResponse, EndpointSummary
from neodictate.services.service_container import ServiceContainer

router = APIRouter(prefix="/endpoints", tags=["Endpoints"])


@router.get(
    "",
    response_model=EndpointListResponse,
    summary="List all endpoints",
    description="Configured controllers with their wiring and active dictate timestamp"
)
async def list_endpoints(
    services: ServiceContainer = Depends(get_service_container)
) -> EndpointListResponse:
    endpoints = [EndpointSummary(**entry) for entry in services.registry.snapshot()]
    return EndpointListResponse(endpoints=endpoints, count=len(endpoints))
