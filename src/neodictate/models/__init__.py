"""Domain models"""

from .dictate import Dictate, Step
from .endpoint import Endpoint, EndpointConfig
from .enums import Location, LogCategory, LogLevel, UpdateKind

__all__ = [
    "Dictate",
    "Step",
    "Endpoint",
    "EndpointConfig",
    "Location",
    "LogCategory",
    "LogLevel",
    "UpdateKind",
]
