from .api_server_shutdown_handler import APIServerShutdownHandler
from .idle_refresher_shutdown_handler import IdleRefresherShutdownHandler

__all__ = [
    "APIServerShutdownHandler",
    "IdleRefresherShutdownHandler",
]
