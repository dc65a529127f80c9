"""
main.py - Application entry point for neodictate
------------------------------------------------

Responsible for:
- loading configuration
- wiring registry, palette and refresher into the service container
- running the HTTP server and the idle refresher in one event loop
- graceful shutdown on Ctrl+C, SIGTERM or a failed background task
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

from neodictate.api.main import create_app
from neodictate.lifecycle import APIServerWrapper, ShutdownCoordinator
from neodictate.lifecycle.handlers import APIServerShutdownHandler, IdleRefresherShutdownHandler
from neodictate.managers import ConfigManager
from neodictate.services import EndpointRegistry, IdleRefresher, ServiceContainer
from neodictate.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


async def main(
    config_path: Union[str, Path, None] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    uvicorn_log_level: str = "warning",
) -> int:
    """
    Run the server until shutdown.

    Args:
        config_path: Main config file (bundled config when None)
        host: Listen address, overrides server.host
        port: Listen port, overrides server.port
        uvicorn_log_level: Log level handed to uvicorn

    Returns:
        Process exit code (1 when a background task failed)
    """
    log.info("Starting neodictate...")

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    log.info("Loading configuration...")
    config_manager = ConfigManager(config_path)
    config_manager.load()
    settings = config_manager.settings

    # ========================================================================
    # 2. REGISTRY & REFRESHER
    # ========================================================================

    registry = EndpointRegistry(config_manager.endpoints)
    registry.initialize()
    log.info(f"Registry ready with {len(registry)} endpoints")

    refresher = IdleRefresher(
        registry,
        config_manager.palette,
        idle_window_s=settings.idle_window_s,
        interval_s=settings.refresh_interval_s,
    )
    await refresher.start()

    # ========================================================================
    # 3. SERVICE CONTAINER & API SERVER
    # ========================================================================

    services = ServiceContainer(
        registry=registry,
        palette=config_manager.palette,
        settings=settings,
        refresher=refresher,
    )

    app = create_app(services)
    api_wrapper = APIServerWrapper(
        app,
        host=host or settings.host,
        port=port if port is not None else settings.port,
        log_level=uvicorn_log_level,
    )
    api_task = asyncio.create_task(api_wrapper.start(), name="APIServer")

    # ========================================================================
    # 4. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(IdleRefresherShutdownHandler(refresher))
    coordinator.register(APIServerShutdownHandler(api_wrapper))
    coordinator.watch(api_task, "FastAPI/Uvicorn server")
    if refresher.task is not None:
        coordinator.watch(refresher.task, "Idle refresher loop")

    loop = asyncio.get_running_loop()
    coordinator.setup_signal_handlers(loop)

    log.info("🏁 Application initialized. Waiting for exit signal...")

    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()

    if not api_task.done():
        api_task.cancel()
    await asyncio.gather(api_task, return_exceptions=True)

    if coordinator.failed_task:
        log.error("neodictate stopped after a task failure", task=coordinator.failed_task)
        return 1

    log.info("👋 neodictate shut down cleanly.")
    return 0
