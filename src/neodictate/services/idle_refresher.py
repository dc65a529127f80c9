"""
Idle refresher - keeps every endpoint's dictate fresh

An endpoint whose dictate is older than the inactivity window gets a random
single-step palette color. The loop scans all endpoints, then sleeps for a
fixed polling interval.
"""

import asyncio
import random
from typing import List, Optional

from neodictate.managers.palette_manager import PaletteManager
from neodictate.models.errors import DomainError
from neodictate.services.codec import random_steps
from neodictate.services.endpoint_registry import EndpointRegistry
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.REFRESHER)

NANOS_PER_SECOND = 1_000_000_000


class IdleRefresher:
    """
    Background liveness task.

    Example:
        refresher = IdleRefresher(registry, palette, idle_window_s=120)
        await refresher.start()
        ...
        await refresher.stop()
    """

    def __init__(
        self,
        registry: EndpointRegistry,
        palette: PaletteManager,
        idle_window_s: float = 120.0,
        interval_s: float = 1.0,
        rng: Optional[random.Random] = None,
    ):
        if interval_s <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval_s}")
        self.registry = registry
        self.palette = palette
        self.idle_window_ns = int(idle_window_s * NANOS_PER_SECOND)
        self.interval_s = interval_s
        self.rng = rng or random.Random()

        self.running = False
        self.task: Optional[asyncio.Task] = None
        self.scans = 0
        self.refreshes = 0
        self.failures = 0

    # === Lifecycle ===

    async def start(self) -> None:
        """Start the refresh loop."""
        if self.running:
            log.warn("IdleRefresher already running")
            return

        self.running = True
        self.task = asyncio.create_task(self._loop(), name="IdleRefresher")
        log.info(
            "Idle refresher started",
            window=f"{self.idle_window_ns / NANOS_PER_SECOND:g}s",
            interval=f"{self.interval_s:g}s",
        )

    async def stop(self) -> None:
        """Stop the refresh loop."""
        if not self.running:
            return
        self.running = False
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None

        log.info("Idle refresher stopped", scans=self.scans, refreshes=self.refreshes, failures=self.failures)

    @property
    def is_running(self) -> bool:
        return self.task is not None and not self.task.done()

    # === Scan ===

    def is_stale(self, timestamp_ns: Optional[int], now_ns: int) -> bool:
        if timestamp_ns is None:
            return True
        return now_ns - timestamp_ns > self.idle_window_ns

    async def refresh_once(self) -> List[str]:
        """
        Scan every endpoint once and refresh the stale ones.

        A failure on one endpoint is logged and the scan moves on.

        Returns:
            Ids of the endpoints that received a new dictate
        """
        refreshed = []
        self.scans += 1

        for endpoint in self.registry.all():
            if not self.is_stale(endpoint.dictate_timestamp_ns, self.registry.now_ns()):
                continue

            try:
                name, steps = random_steps(self.palette, endpoint.led_count, self.rng)
                await self.registry.apply_dictate(endpoint, steps)
            except DomainError as ex:
                self.failures += 1
                log.error("Failed to refresh endpoint", endpoint=endpoint.display_name, error=ex.message)
                continue
            except Exception as ex:
                self.failures += 1
                log.error(
                    f"Unexpected error refreshing endpoint: {ex}",
                    exc_info=True,
                    endpoint=endpoint.display_name,
                )
                continue

            self.refreshes += 1
            refreshed.append(endpoint.id)
            log.info("Setting new color for idle endpoint", endpoint=endpoint.display_name, color=name)

        return refreshed

    async def _loop(self) -> None:
        while self.running:
            try:
                await self.refresh_once()
            except Exception as e:
                log.error(f"Refresh scan error: {e}", exc_info=True)

            await asyncio.sleep(self.interval_s)
