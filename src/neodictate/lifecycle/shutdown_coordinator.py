"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, critical task monitoring, shutdown sequencing, and
error handling across shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import Dict, List, Optional

from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(IdleRefresherShutdownHandler(refresher))
        coordinator.register(APIServerShutdownHandler(api_wrapper))
        coordinator.watch(api_task, "API server")

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List = []
        self._critical: Dict[asyncio.Task, str] = {}
        self._shutdown_event = asyncio.Event()
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self.reason: Optional[str] = None
        self.failed_task: Optional[str] = None

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have a shutdown_priority property (int) and an async
        shutdown() method.
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def watch(self, task: asyncio.Task, description: str) -> None:
        """Trigger shutdown if this long-lived task ends with an error"""
        self._critical[task] = description

    def request_shutdown(self, reason: str) -> None:
        if self.reason is None:
            self.reason = reason
        self._shutdown_event.set()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutdown_event.is_set()

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT (Ctrl+C) and SIGTERM handlers."""

        def signal_handler(sig: signal.Signals) -> None:
            log.info(f"Signal {sig.name} received → triggering shutdown")
            self.request_shutdown(sig.name)

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    async def wait_for_shutdown(self) -> None:
        """
        Return when a shutdown is requested or a watched task fails.

        A watched task that finishes cleanly (or is cancelled) is dropped from
        monitoring without triggering shutdown.
        """
        while not self._shutdown_event.is_set():
            waiter = asyncio.create_task(self._shutdown_event.wait())
            try:
                done, _ = await asyncio.wait(
                    set(self._critical) | {waiter},
                    return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if not waiter.done():
                    waiter.cancel()

            for task in done:
                if task is waiter:
                    continue
                description = self._critical.pop(task)
                if task.cancelled():
                    continue
                error = task.exception()
                if error is not None:
                    log.error(f"Critical task failed: {description} - {error}")
                    self.failed_task = self.failed_task or description
                    self.request_shutdown(f"Task failure: {description}")
                else:
                    log.debug(f"Critical task completed cleanly: {description}")

    async def shutdown_all(self) -> None:
        """
        Execute graceful shutdown of all handlers in priority order.

        Handlers are called in descending priority order (highest first).
        A failing or hanging handler is logged and skipped.
        """
        log.info("🛑 Initiating graceful shutdown sequence...")
        log.info(f"   Reason: {self.reason or 'UNKNOWN'}")

        sorted_handlers = sorted(
            self._handlers, key=lambda h: h.shutdown_priority, reverse=True
        )

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"⚠️  Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {handler_name} shutdown complete")
            except asyncio.TimeoutError:
                log.error(f"⚠️  {handler_name} shutdown timeout ({self._timeout_per_handler}s)")
            except Exception as e:
                log.error(f"❌ Error shutting down {handler_name}: {e}", exc_info=True)

        log.info("✓ Shutdown sequence complete")
