"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files and builds server settings, endpoint definitions
and the palette.
"""

import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from neodictate.managers.palette_manager import PaletteManager
from neodictate.models.endpoint import EndpointConfig
from neodictate.models.enums import Location
from neodictate.models.errors import ConfigurationError
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6789
DEFAULT_IDLE_WINDOW_S = 120.0
DEFAULT_REFRESH_INTERVAL_S = 1.0
DEFAULT_LED_COUNT = 5
DEFAULT_STEP_DURATION_MS = 100


@dataclass(frozen=True)
class ServerSettings:
    """Process-level settings from the `server:` section"""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    idle_window_s: float = DEFAULT_IDLE_WINDOW_S
    refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S
    static_dir: Optional[Path] = None


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Falls back to factory defaults if the main file can't be
    read or parsed.

    Example:
        config = ConfigManager()
        config.load()

        config.settings.port       # 6789
        config.endpoints           # List[EndpointConfig]
        config.palette.pick()      # ("Coral", 0xFF7F50)
    """

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        defaults_path: Union[str, Path, None] = None
    ):
        """
        Args:
            config_path: Path to main config.yaml (bundled config when None)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path) if config_path else PACKAGE_CONFIG_DIR / "config.yaml"
        self.factory_defaults_path = Path(defaults_path) if defaults_path else PACKAGE_CONFIG_DIR / "factory_defaults.yaml"
        self.data: Dict[str, Any] = {}
        self.used_factory_defaults = False

        self.settings: ServerSettings
        self.endpoints: List[EndpointConfig]
        self.palette: PaletteManager

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has an 'include:' list, load and merge those files in order
        3. Otherwise treat it as a monolithic config
        4. Fall back to factory defaults on read/parse failure
        5. Build settings, endpoints and palette

        Returns:
            Merged config data dict

        Raises:
            ConfigurationError: If the loaded data is invalid
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if not isinstance(main_config, dict):
                raise ValueError("top level must be a mapping")

            if 'include' in main_config:
                log.info("Using include-based configuration", path=str(self.config_path))
                self.data = self._load_with_includes(main_config['include'], self.config_path.parent)
                for key, value in main_config.items():
                    if key != 'include':
                        self.data[key] = value
            else:
                log.info("Using monolithic configuration", path=str(self.config_path))
                self.data = main_config

        except (OSError, yaml.YAMLError, ValueError) as ex:
            log.error("Failed to load config", path=str(self.config_path), error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")

            with open(self.factory_defaults_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}
            self.used_factory_defaults = True

        self._initialize()
        return self.data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: Filenames to load (e.g., ["server.yaml", "endpoints.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict (later files override earlier top-level keys)
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            with open(filepath, 'r', encoding='utf-8') as f:
                file_data = yaml.safe_load(f)
            if file_data:
                if not isinstance(file_data, dict):
                    raise ValueError(f"{filename}: top level must be a mapping")
                merged.update(file_data)
                log.debug(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged

    def _initialize(self) -> None:
        self.settings = self._parse_settings(self.data.get("server") or {})
        self.endpoints = self._parse_endpoints(self.data.get("endpoints") or [], self.data.get("defaults") or {})
        self.palette = PaletteManager(self.data.get("palette") or {})

        if not self.endpoints:
            log.warn("No endpoints defined in config!")
        else:
            log.info(f"Loaded {len(self.endpoints)} endpoint definitions")
        if len(self.palette) == 0:
            log.warn("Palette is empty, random dictates will fail")
        else:
            log.info(f"Loaded palette with {len(self.palette)} colors")

    # ===== Sections =====

    def _parse_settings(self, server: Dict[str, Any]) -> ServerSettings:
        static_dir = server.get("static_dir")
        if static_dir:
            static_dir = Path(static_dir)
            if not static_dir.is_absolute():
                static_dir = self.config_path.parent / static_dir

        settings = ServerSettings(
            host=str(server.get("host", DEFAULT_HOST)),
            port=_positive_int("server.port", server.get("port", DEFAULT_PORT)),
            idle_window_s=_positive_float("server.idle_window_s", server.get("idle_window_s", DEFAULT_IDLE_WINDOW_S)),
            refresh_interval_s=_positive_float("server.refresh_interval_s", server.get("refresh_interval_s", DEFAULT_REFRESH_INTERVAL_S)),
            static_dir=static_dir or None,
        )
        return settings

    def _parse_endpoints(self, entries: List[Dict[str, Any]], defaults: Dict[str, Any]) -> List[EndpointConfig]:
        """
        Parse endpoint list

        Entry format:
            - id: "8c:aa:b5:7a:bc:ad"
              name: "Gutter Kitchen"
              location: GUTTER
              led_count: 5            # optional, defaults.led_count
              step_duration_ms: 100   # optional, defaults.step_duration_ms
        """
        default_leds = _non_negative_int("defaults.led_count", defaults.get("led_count", DEFAULT_LED_COUNT))
        default_step = _positive_int("defaults.step_duration_ms", defaults.get("step_duration_ms", DEFAULT_STEP_DURATION_MS))

        endpoints = []
        seen = set()
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigurationError(f"endpoints[{index}] must be a mapping")

            raw_id = str(entry.get("id") or "").strip()
            if not raw_id:
                raise ConfigurationError(f"endpoints[{index}] is missing an id")
            endpoint_id = raw_id.lower()
            if endpoint_id in seen:
                raise ConfigurationError(f"Duplicate endpoint id: {endpoint_id}", details={"id": endpoint_id})
            seen.add(endpoint_id)

            location_name = str(entry.get("location", Location.INDOOR.name)).upper()
            try:
                location = Location[location_name]
            except KeyError:
                raise ConfigurationError(
                    f"endpoints[{index}]: unknown location '{location_name}'",
                    details={"valid_locations": [loc.name for loc in Location]}
                )

            endpoints.append(EndpointConfig(
                id=endpoint_id,
                display_name=str(entry.get("name") or endpoint_id),
                location=location,
                led_count=_non_negative_int(f"endpoints[{index}].led_count", entry.get("led_count", default_leds)),
                step_duration_ms=_positive_int(f"endpoints[{index}].step_duration_ms", entry.get("step_duration_ms", default_step)),
            ))

        return endpoints


def _non_negative_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _positive_int(name: str, value: Any) -> int:
    if _non_negative_int(name, value) == 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return value


def _positive_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
    return float(value)
