"""
Enums for the color dictate server
"""

from enum import Enum, auto


class Location(Enum):
    """Where an endpoint is installed (used to group endpoints)"""
    GUTTER = auto()
    TEST = auto()
    INDOOR = auto()


class UpdateKind(Enum):
    """
    The closed set of update request shapes.

    BASIC:    random palette color, single step
    RGB_TIME: list of packed RGB colors with durations
    HSV_TIME: list of HSV colors with durations
    """
    BASIC = "basic"
    RGB_TIME = "rgbtime"
    HSV_TIME = "hsvtime"


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    REGISTRY = auto()    # Endpoint lookup, dictate writes
    CODEC = auto()       # Step construction, color conversion
    REFRESHER = auto()   # Idle refresh loop
    API = auto()         # HTTP requests
    SYSTEM = auto()      # Startup, errors
    SHUTDOWN = auto()    # Graceful shutdown sequence

    GENERAL = auto()     # Default general category
