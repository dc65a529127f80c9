from __future__ import annotations
from typing import TYPE_CHECKING

from neodictate.lifecycle.shutdown_protocol import IShutdownHandler
from neodictate.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from neodictate.lifecycle.api_server_wrapper import APIServerWrapper

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for the HTTP server (FastAPI + Uvicorn).

    Priority: 90 (after the idle refresher, so no refresh lands mid-shutdown)
    """

    def __init__(self, api_wrapper: "APIServerWrapper"):
        self.api_wrapper = api_wrapper

    @property
    def shutdown_priority(self) -> int:
        return 90

    async def shutdown(self) -> None:
        log.info("Stopping API server...")

        if not self.api_wrapper.is_running:
            log.debug("API server not running")
            return

        await self.api_wrapper.stop()
