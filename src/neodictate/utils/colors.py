"""
Color conversion utilities

Pure functions for packing RGB values and converting HSV to RGB.
Packed colors are `R<<16 | G<<8 | B`, the layout FastLED's CRGB accepts
on the controllers.
"""

import colorsys
from typing import List, Tuple, Union

Number = Union[int, float]


def pack_rgb(r: int, g: int, b: int) -> int:
    """
    Pack 8-bit channels into a single int

    Example:
        pack_rgb(255, 0, 0)  # 0xFF0000 (16711680)
    """
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"RGB channel out of range 0-255: {channel}")
    return (r << 16) | (g << 8) | b


def unpack_rgb(color: int) -> Tuple[int, int, int]:
    """Split a packed color into (r, g, b)"""
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def parse_color(value: Union[int, str]) -> int:
    """
    Parse a packed color from config data

    Accepts ints and "0xRRGGBB" / "#RRGGBB" strings.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid color: {value!r}")
    if isinstance(value, int):
        color = value
    elif isinstance(value, str):
        text = value.strip()
        if text.startswith("#"):
            text = text[1:]
        elif text.lower().startswith("0x"):
            text = text[2:]
        color = int(text, 16)
    else:
        raise ValueError(f"Invalid color: {value!r}")

    if not 0 <= color <= 0xFFFFFF:
        raise ValueError(f"Color out of range: {value!r}")
    return color


def _to_8bit(channel: float) -> int:
    # round half up, same as the firmware-side conversion
    return int(min(max(channel, 0.0), 1.0) * 255.0 + 0.5)


def hsv_to_rgb(h: Number, s: Number, v: Number) -> Tuple[int, int, int]:
    """
    Convert HSV to 8-bit RGB

    Args:
        h: Hue in degrees (0-360)
        s: Saturation in percent (0-100)
        v: Value in percent (0-100)

    Returns:
        (r, g, b) tuple with values 0-255

    Example:
        hsv_to_rgb(0, 0, 100)    # (255, 255, 255) white
        hsv_to_rgb(0, 100, 100)  # (255, 0, 0) red
        hsv_to_rgb(240, 100, 50) # (0, 0, 128) navy
    """
    r, g, b = colorsys.hsv_to_rgb((h % 360) / 360.0, s / 100.0, v / 100.0)
    return _to_8bit(r), _to_8bit(g), _to_8bit(b)


def hsv_to_packed(h: Number, s: Number, v: Number) -> int:
    """HSV straight to a packed RGB int"""
    return pack_rgb(*hsv_to_rgb(h, s, v))


def broadcast(color: int, led_count: int) -> List[int]:
    """The same color for every LED of a string"""
    return [color] * led_count
