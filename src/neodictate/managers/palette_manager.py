"""
Palette Manager - Named colors for random dictates

Processes palette data from ConfigManager (does NOT load files).
Single responsibility: parse and provide access to the named color table.
"""

import random
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from neodictate.models.errors import ConfigurationError
from neodictate.utils.colors import parse_color


class PaletteManager:
    """
    Immutable name -> packed RGB table

    Example:
        palette = PaletteManager({"Red": "0xFF0000", "Coral": "#FF7F50"})

        palette.get("Coral")          # 0xFF7F50
        name, color = palette.pick()  # random entry
    """

    def __init__(self, data: Dict[str, object]):
        """
        Args:
            data: {name: color} where color is an int or "0xRRGGBB"/"#RRGGBB"

        Raises:
            ConfigurationError: If a color can't be parsed
        """
        colors = {}
        for name, value in (data or {}).items():
            try:
                colors[str(name)] = parse_color(value)
            except ValueError as ex:
                raise ConfigurationError(
                    f"Invalid palette color '{name}': {ex}",
                    details={"name": name, "value": value}
                )
        self._colors: Mapping[str, int] = MappingProxyType(colors)
        self._names: List[str] = sorted(colors)

    @property
    def colors(self) -> Mapping[str, int]:
        """Read-only {name: packed rgb} view"""
        return self._colors

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, name: str) -> bool:
        return name in self._colors

    def get(self, name: str) -> int:
        """
        Raises:
            KeyError: If the color doesn't exist
        """
        return self._colors[name]

    def pick(self, rng: Optional[random.Random] = None) -> Tuple[str, int]:
        """
        Draw a random (name, color) entry

        Raises:
            ConfigurationError: If the palette is empty
        """
        if not self._names:
            raise ConfigurationError("Palette is empty, cannot pick a random color")
        name = (rng or random).choice(self._names)
        return name, self._colors[name]
