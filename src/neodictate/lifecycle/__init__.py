"""
Lifecycle subsystem
-------------------

Exports the public API for:
- running the HTTP server inside the event loop
- graceful shutdown
- shutdown handlers

External code should import from:
    from neodictate.lifecycle import ShutdownCoordinator, APIServerWrapper
    from neodictate.lifecycle.handlers import APIServerShutdownHandler
"""

from .api_server_wrapper import APIServerWrapper
from .shutdown_coordinator import ShutdownCoordinator
from .shutdown_protocol import IShutdownHandler
from . import handlers

__all__ = [
    "APIServerWrapper",
    "ShutdownCoordinator",
    "IShutdownHandler",
    "handlers",
]
