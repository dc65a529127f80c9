"""
FastAPI Application Factory

Assembles the app around a ServiceContainer:
- Controller routes (/status, /update/...)
- Operator routes (/api/endpoints, /api/health)
- Exception handlers
- Optional static web UI (/ and /static/...)

The container is stored on `app.state.services`; tests build an app around
an isolated registry the same way main.py does for the real one.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from neodictate import __version__
from neodictate.api.middleware.error_handler import register_exception_handlers
from neodictate.api.routes import endpoints, status as status_routes, update
from neodictate.services.service_container import ServiceContainer
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def create_app(
    services: ServiceContainer,
    title: str = "neodictate",
    description: str = "Color dictates for addressable LED controllers",
    docs_enabled: bool = True,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        services: Registry, palette and settings shared by all requests
        title: API title (shown in docs)
        description: API description
        docs_enabled: Enable /docs and /redoc

    Returns:
        Configured FastAPI application ready to run
    """
    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )
    app.state.services = services

    log.info(f"Creating FastAPI app: {title} v{__version__}")

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================
    # Controller-facing paths are fixed by the firmware and stay at the root.

    app.include_router(status_routes.router)
    app.include_router(update.router)
    app.include_router(endpoints.router, prefix="/api")

    @app.get(
        "/api/health",
        tags=["System"],
        summary="Health check",
        description="Check if API is running and responding"
    )
    async def health_check():
        refresher = services.refresher
        return {
            "status": "healthy",
            "service": "neodictate",
            "version": __version__,
            "endpoints": len(services.registry),
            "idle_refresher": refresher.is_running if refresher else False,
        }

    # =========================================================================
    # Static web UI
    # =========================================================================

    _mount_static(app, services.settings.static_dir)

    log.debug("Routes registered: /status, /update, /api/endpoints, /api/health")
    return app


def _mount_static(app: FastAPI, static_dir: Optional[Path]) -> None:
    """
    Serve index.html at / and static_dir/static at /static.

    Without a static directory (or index.html) the root path is a 404.
    """
    index = static_dir / "index.html" if static_dir else None

    @app.get("/", include_in_schema=False)
    async def root():
        if index is None or not index.is_file():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        return FileResponse(index)

    if static_dir and (static_dir / "static").is_dir():
        app.mount("/static", StaticFiles(directory=static_dir / "static"), name="static")
        log.info("Serving static files", directory=str(static_dir))
