"""
Managers for configuration
"""

from .config_manager import ConfigManager, ServerSettings
from .palette_manager import PaletteManager

__all__ = ['ConfigManager', 'ServerSettings', 'PaletteManager']
