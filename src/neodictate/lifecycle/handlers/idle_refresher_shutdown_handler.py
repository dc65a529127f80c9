from __future__ import annotations
from typing import TYPE_CHECKING

from neodictate.lifecycle.shutdown_protocol import IShutdownHandler
from neodictate.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from neodictate.services.idle_refresher import IdleRefresher

log = get_logger().for_category(LogCategory.SHUTDOWN)


class IdleRefresherShutdownHandler(IShutdownHandler):
    """
    Stops the idle refresher loop.

    Priority: 100 (first, so no endpoint is reassigned while the server stops)
    """

    def __init__(self, refresher: "IdleRefresher"):
        self.refresher = refresher

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        if not self.refresher.is_running:
            log.debug("Idle refresher not running")
            return

        log.info("Stopping idle refresher...")
        await self.refresher.stop()
