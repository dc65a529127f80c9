"""Endpoint registry - the authoritative table of endpoints and their dictates"""

import time
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from neodictate.models.dictate import Dictate, Step
from neodictate.models.endpoint import Endpoint, EndpointConfig
from neodictate.models.errors import EndpointNotFoundError, SerializationError
from neodictate.services.codec import solid_step
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.REGISTRY)

WHITE = 0xFFFFFF

Clock = Callable[[], int]


class EndpointRegistry:
    """
    Endpoints keyed by lower-case hardware address.

    The key set is fixed at construction. Each endpoint's mutable fields are
    only touched while holding that endpoint's lock, so a status read never
    sees a dictate paired with the serialized form of another write.

    Example:
        registry = EndpointRegistry(config_manager.endpoints)
        registry.initialize()

        endpoint = registry.resolve("8C:AA:B5:7A:BC:AD")
        await registry.apply_dictate(endpoint, steps)
    """

    def __init__(self, configs: Iterable[EndpointConfig], clock: Clock = time.time_ns):
        """
        Args:
            configs: Static endpoint definitions
            clock: Wall clock in nanoseconds, used when no timestamp is given
        """
        self._clock = clock
        endpoints: Dict[str, Endpoint] = {}
        for config in configs:
            key = config.id.lower()
            if key in endpoints:
                raise ValueError(f"Duplicate endpoint id: {key}")
            if key != config.id:
                config = EndpointConfig(
                    id=key,
                    display_name=config.display_name,
                    location=config.location,
                    led_count=config.led_count,
                    step_duration_ms=config.step_duration_ms,
                )
            endpoints[key] = Endpoint.from_config(config)
        self._endpoints: Mapping[str, Endpoint] = MappingProxyType(endpoints)

        log.info(f"EndpointRegistry initialized with {len(endpoints)} endpoints")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, raw_id: str) -> Endpoint:
        """
        Find an endpoint by hardware address (case-insensitive)

        Raises:
            EndpointNotFoundError: If the address isn't configured
        """
        endpoint = self.get(raw_id)
        if endpoint is None:
            raise EndpointNotFoundError(raw_id)
        return endpoint

    def get(self, raw_id: str) -> Optional[Endpoint]:
        return self._endpoints.get((raw_id or "").lower())

    def all(self) -> List[Endpoint]:
        return list(self._endpoints.values())

    def ids(self) -> List[str]:
        return list(self._endpoints.keys())

    def __len__(self) -> int:
        return len(self._endpoints)

    def now_ns(self) -> int:
        return self._clock()

    # ------------------------------------------------------------------
    # Dictate writes
    # ------------------------------------------------------------------

    def initialize(self, timestamp_ns: Optional[int] = None) -> None:
        """
        Give every endpoint a full-brightness white dictate.

        White lights every LED, which makes wiring faults obvious right after
        power-up. Called once at startup, before any request is served.
        """
        for endpoint in self._endpoints.values():
            self._commit(endpoint, [solid_step(WHITE, endpoint.led_count)], timestamp_ns)
        log.info("Default dictates assigned", endpoints=len(self._endpoints))

    async def apply_dictate(
        self,
        endpoint: Endpoint,
        steps: Sequence[Step],
        timestamp_ns: Optional[int] = None
    ) -> Dictate:
        """
        Replace the endpoint's dictate and its serialized form.

        Args:
            endpoint: Target endpoint (from resolve())
            steps: Ordered steps, must not be empty
            timestamp_ns: Explicit timestamp, wall clock now when None

        Returns:
            The dictate now in effect

        Raises:
            SerializationError: If the dictate can't be serialized; the
                previous dictate stays in effect
        """
        async with endpoint.lock:
            dictate = self._commit(endpoint, steps, timestamp_ns)

        log.info(
            "Dictate applied",
            endpoint=endpoint.display_name,
            steps=len(dictate.steps),
            ts=dictate.timestamp_ns,
        )
        return dictate

    def _commit(self, endpoint: Endpoint, steps: Sequence[Step], timestamp_ns: Optional[int]) -> Dictate:
        """Build, serialize and store; caller holds the lock (or is single-threaded startup)"""
        ts = self._clock() if timestamp_ns is None else timestamp_ns
        dictate = Dictate(timestamp_ns=ts, steps=tuple(steps))
        try:
            serialized = dictate.serialize()
        except (TypeError, ValueError) as ex:
            log.error("Failed to serialize dictate", endpoint=endpoint.id, error=str(ex))
            raise SerializationError(endpoint.id, str(ex)) from ex

        endpoint.current_dictate = dictate
        endpoint.serialized_dictate = serialized
        return dictate

    # ------------------------------------------------------------------
    # Wire parameters
    # ------------------------------------------------------------------

    async def set_wire_parameters(self, endpoint: Endpoint, led_count: int, step_duration_ms: int) -> None:
        """
        Update LED count and step period.

        Only affects sequences built afterwards; the active dictate is not
        resized.
        """
        async with endpoint.lock:
            self._set_wire_parameters(endpoint, led_count, step_duration_ms)

    def _set_wire_parameters(self, endpoint: Endpoint, led_count: int, step_duration_ms: int) -> None:
        if endpoint.led_count != led_count or endpoint.step_duration_ms != step_duration_ms:
            log.debug(
                "Wire parameters changed",
                endpoint=endpoint.display_name,
                leds=f"{endpoint.led_count} → {led_count}",
                step_ms=f"{endpoint.step_duration_ms} → {step_duration_ms}",
            )
        endpoint.led_count = led_count
        endpoint.step_duration_ms = step_duration_ms

    async def report_status(self, endpoint: Endpoint, led_count: int, step_duration_ms: int) -> str:
        """
        Record the controller's wire parameters and return its serialized dictate.

        Both happen in one critical section, so the returned body belongs to
        the latest completed write.
        """
        async with endpoint.lock:
            if endpoint.serialized_dictate is None:
                raise SerializationError(endpoint.id, "no dictate assigned yet")
            self._set_wire_parameters(endpoint, led_count, step_duration_ms)
            return endpoint.serialized_dictate

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def snapshot(self) -> List[dict]:
        """Plain-dict view of every endpoint, for listing and logs"""
        return [
            {
                "id": endpoint.id,
                "name": endpoint.display_name,
                "location": endpoint.location.name,
                "led_count": endpoint.led_count,
                "step_duration_ms": endpoint.step_duration_ms,
                "dictate_ts": endpoint.dictate_timestamp_ns,
                "steps": len(endpoint.current_dictate.steps) if endpoint.current_dictate else 0,
            }
            for endpoint in self._endpoints.values()
        ]
