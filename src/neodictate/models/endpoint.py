"""Endpoint domain models"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

from neodictate.models.dictate import Dictate
from neodictate.models.enums import Location


@dataclass(frozen=True)
class EndpointConfig:
    """Immutable endpoint definition from YAML"""
    id: str
    display_name: str
    location: Location
    led_count: int
    step_duration_ms: int


@dataclass
class Endpoint:
    """
    Mutable per-controller state.

    current_dictate and serialized_dictate are only written together by
    EndpointRegistry while holding `lock`. led_count and step_duration_ms are
    reported by the controller on every status request.
    """
    config: EndpointConfig
    led_count: int
    step_duration_ms: int
    current_dictate: Optional[Dictate] = None
    serialized_dictate: Optional[str] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @classmethod
    def from_config(cls, config: EndpointConfig) -> "Endpoint":
        return cls(
            config=config,
            led_count=config.led_count,
            step_duration_ms=config.step_duration_ms,
        )

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @property
    def location(self) -> Location:
        return self.config.location

    @property
    def dictate_timestamp_ns(self) -> Optional[int]:
        """Timestamp of the active dictate, None before initialization"""
        if self.current_dictate is None:
            return None
        return self.current_dictate.timestamp_ns
