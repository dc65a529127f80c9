"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer

from neodictate import __version__
from neodictate.models.enums import LogLevel
from neodictate.models.errors import ConfigurationError
from neodictate.utils.logger import configure_logger

app = typer.Typer(help="Color dictate server for addressable LED controllers")

UVICORN_LEVELS = {
    LogLevel.DEBUG: "debug",
    LogLevel.INFO: "info",
    LogLevel.WARN: "warning",
    LogLevel.ERROR: "error",
}


def _parse_level(value: str) -> LogLevel:
    try:
        return LogLevel[value.upper()]
    except KeyError:
        valid = ", ".join(level.name for level in LogLevel)
        raise typer.BadParameter(f"unknown log level '{value}' (choose from {valid})") from None


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Listen address [default: server.host or 127.0.0.1]"),
    port: Optional[int] = typer.Option(None, "--port", min=1, max=65535, help="Listen port [default: server.port or 6789]"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml (bundled config by default)"),
    log_level: str = typer.Option("INFO", "--log-level", help="DEBUG, INFO, WARN or ERROR"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable ANSI colors in log output"),
) -> None:
    """Run the dictate server until interrupted."""
    from neodictate.main import main

    level = _parse_level(log_level)
    configure_logger(min_level=level, use_colors=not no_color and sys.stdout.isatty())

    try:
        code = asyncio.run(main(config, host=host, port=port, uvicorn_log_level=UVICORN_LEVELS[level]))
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=2) from None
    except KeyboardInterrupt:
        code = 0

    if code:
        raise typer.Exit(code=code)


@app.command("version")
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
