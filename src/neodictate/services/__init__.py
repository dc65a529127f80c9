"""Services layer"""

from .endpoint_registry import EndpointRegistry
from .idle_refresher import IdleRefresher
from .service_container import ServiceContainer

__all__ = [
    "EndpointRegistry",
    "IdleRefresher",
    "ServiceContainer",
]
