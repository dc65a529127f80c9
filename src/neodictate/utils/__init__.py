"""
Utility functions for the dictate server
"""

from .colors import (
    pack_rgb,
    unpack_rgb,
    parse_color,
    hsv_to_rgb,
    hsv_to_packed,
    broadcast,
)

__all__ = [
    'pack_rgb',
    'unpack_rgb',
    'parse_color',
    'hsv_to_rgb',
    'hsv_to_packed',
    'broadcast',
]
