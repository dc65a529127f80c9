from __future__ import annotations
import asyncio
import contextlib
import uvicorn
from fastapi import FastAPI
from typing import Optional
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Runs Uvicorn inside an asyncio task so that signal handling stays with the
    ShutdownCoordinator instead of Uvicorn.

    Behaviour:
      - start() launches uvicorn.Server.serve() as a background task and blocks
        until stop() is called or the server task ends on its own.
      - stop() asks Uvicorn to exit, waits for the serve task, and cancels it
        if it does not finish in time.
      - A startup failure (port in use) surfaces from start() as RuntimeError,
        so a watching coordinator sees the task fail.
    """

    def __init__(
        self,
        app: FastAPI,
        host: str = "127.0.0.1",
        port: int = 6789,
        log_level: str = "warning",
    ):
        self.app = app
        self.host = host
        self.port = port
        self.log_level = log_level
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event: asyncio.Event = asyncio.Event()

    # ----------------------------------------------------------------------
    # INTERNAL
    # ----------------------------------------------------------------------
    def _create_server(self) -> uvicorn.Server:
        """Create a uvicorn.Server instance with its own signal handlers disabled."""
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level=self.log_level,
            access_log=False,
            server_header=False,
        )

        server = uvicorn.Server(config)
        # uvicorn < 0.29 installs handlers here, newer releases capture signals around serve()
        server.install_signal_handlers = lambda: None  # type: ignore
        server.capture_signals = contextlib.nullcontext  # type: ignore

        return server

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn reports startup failures (port in use) through sys.exit
            raise RuntimeError(
                f"API server on {self.host}:{self.port} failed to start (exit code {e.code})"
            ) from e

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    async def start(self) -> None:
        """
        Serve until stop() is called.

        Schedule as a task for non-blocking use. Raises whatever the serve
        task raised if Uvicorn stops by itself (for example when the port is
        taken).
        """
        if self._serve_task is not None and not self._serve_task.done():
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"🌐 Launching API server on http://{self.host}:{self.port}")

        self._serve_task = asyncio.create_task(
            self._serve(), name="UvicornServe"
        )
        stop_waiter = asyncio.create_task(self._stop_event.wait())

        try:
            await asyncio.wait(
                {self._serve_task, stop_waiter},
                return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            log.debug("start() cancelled externally, invoking stop()")
            stop_waiter.cancel()
            await self.stop()
            raise

        if not stop_waiter.done():
            stop_waiter.cancel()

        if self._serve_task is not None and self._serve_task.done() and not self._stop_event.is_set():
            task = self._serve_task
            self._server = None
            self._serve_task = None
            error = None if task.cancelled() else task.exception()
            if error is not None:
                raise error
            log.warn("API server exited without stop() being called")
            return

        log.debug("APIServerWrapper.start() exiting (stop requested)")

    async def stop(self, *, shutdown_timeout: float = 2.0) -> None:
        """
        Stop the API server and release the port.

        Steps:
          1. set stop_event so start() unblocks
          2. set server.should_exit and force_exit
          3. wait for the serve task, cancelling it after shutdown_timeout
        """
        self._stop_event.set()

        if self._server is None or self._serve_task is None:
            log.warn("API server stop() called but server was not running")
            return

        log.info("🌐 Stopping API server...")

        self._server.should_exit = True
        self._server.force_exit = True

        try:
            await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=shutdown_timeout)
            log.info("🌐 API server shutdown completed")
        except asyncio.TimeoutError:
            log.warn("🌐 API server shutdown timeout; cancelling serve task")
            self._serve_task.cancel()
            try:
                await self._serve_task
            except asyncio.CancelledError:
                log.debug("Uvicorn serve task cancelled cleanly")
        except Exception as e:
            log.debug(f"Uvicorn serve task ended with error during stop: {e!r}")

        self._server = None
        self._serve_task = None

        log.info("🌐 API server stopped and port released")

    # ----------------------------------------------------------------------
    # PROPERTIES
    # ----------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        """Return whether a uvicorn serve task is active."""
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._serve_task

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server
