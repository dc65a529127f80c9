"""Service Container - the objects every request handler and background task share"""

from dataclasses import dataclass
from typing import Optional

from neodictate.managers.config_manager import ServerSettings
from neodictate.managers.palette_manager import PaletteManager
from neodictate.services.endpoint_registry import EndpointRegistry
from neodictate.services.idle_refresher import IdleRefresher


@dataclass
class ServiceContainer:
    """
    Built once at startup and attached to the FastAPI app (`app.state.services`).

    Tests build their own container around an isolated registry.

    Usage:
        services = ServiceContainer(
            registry=registry,
            palette=palette,
            settings=settings,
            refresher=refresher,
        )
        app = create_app(services)
    """

    registry: EndpointRegistry
    palette: PaletteManager
    settings: ServerSettings
    refresher: Optional[IdleRefresher] = None
