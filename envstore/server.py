"""Development web server launcher with cancellation-safe cleanup."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import Callable, Sequence

from .store import EnvStore

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "8000"


class ServeError(RuntimeError):
    """Raised when the development server cannot be started."""


def resolve_address(
    store: EnvStore, host: str | None = None, port: str | int | None = None
) -> tuple[str, str]:
    """
    Pick the host and port to bind.

    Explicit values win; otherwise APP_HOST and APP_PORT are read from the
    store, falling back to 127.0.0.1:8000.
    """
    host = host or store.get("APP_HOST", DEFAULT_HOST)
    port = port or store.get("APP_PORT", DEFAULT_PORT)

    if not isinstance(host, str) or not host or port in (None, "", False, True):
        raise ServeError("APP_HOST and APP_PORT both need values")

    port = str(port)
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ServeError(f"Invalid port: {port}")

    return host, port


def build_command(host: str, port: str, docroot: str | Path) -> list[str]:
    """Command line for Python's built-in HTTP server."""
    return [
        sys.executable,
        "-m",
        "http.server",
        port,
        "--bind",
        host,
        "--directory",
        str(docroot),
    ]


async def _stop_server(process: asyncio.subprocess.Process, grace: float = 3.0) -> None:
    """Ask the server to exit with SIGTERM, killing it once ``grace`` runs out."""
    if process.returncode is not None:
        return

    with contextlib.suppress(ProcessLookupError):
        process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=grace)
        except asyncio.TimeoutError:
            logger.debug("Server process %d ignored SIGTERM, killing it", process.pid)
            process.kill()
            await process.wait()


async def run_server(
    cmd: Sequence[str],
    *,
    cwd: str | Path | None = None,
    on_start: Callable[[], None] | None = None,
) -> int:
    """
    Run the server process until it exits or the launcher is stopped.

    SIGTERM and cancellation both terminate the child before returning.

    Returns:
        The exit code of the server process
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=str(cwd) if cwd is not None else None,
    )
    logger.debug("Started server process %d: %s", process.pid, " ".join(cmd))

    if on_start:
        on_start()

    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    handles_sigterm = sys.platform != "win32"

    if handles_sigterm:
        loop.add_signal_handler(signal.SIGTERM, stop.set)

    wait_task = asyncio.ensure_future(process.wait())
    stop_task = asyncio.ensure_future(stop.wait())

    try:
        await asyncio.wait({wait_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stop_task.cancel()
        if handles_sigterm:
            loop.remove_signal_handler(signal.SIGTERM)
        await _stop_server(process)
        await asyncio.gather(wait_task, stop_task, return_exceptions=True)

    return process.returncode or 0
