"""
Command-line interface for envstore.

This module provides the CLI entry point and argument parsing.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path

from rich import print as rprint
from rich.logging import RichHandler
from rich.prompt import Prompt
from rich.table import Table

from .config import EnvStoreConfig
from .parser import EnvFileError
from .scaffold import ENVIRONMENTS, write_env_file
from .server import ServeError, build_command, resolve_address, run_server
from .store import EnvStore
from .validator import MissingVariableError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    try:
        return asyncio.run(_main_async(argv))
    except KeyboardInterrupt:
        rprint("[yellow]Cancelled.[/yellow]")
        return 130
    except Exception as exc:
        rprint(f"[red]Error: {exc}[/red]")
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envstore",
        description="Environment file loader and development tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  envstore configure                  # Create .env from the stub, asking for the environment
  envstore configure --env prod       # Create .env for production without asking
  envstore serve                      # Serve ./public on APP_HOST:APP_PORT
  envstore serve --port 9000          # Override the port
  envstore show .env.testing          # Print the variables of a file
  envstore check --require DB_HOST    # Fail if DB_HOST is not set in .env
        """,
    )

    parser.add_argument(
        "--config",
        help="Configuration file path",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="envstore 1.0.0",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (can be used multiple times)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    configure = subparsers.add_parser("configure", help="Create the environment file")
    configure.add_argument(
        "--env",
        choices=sorted(ENVIRONMENTS),
        help="Environment to configure (asked interactively if omitted)",
    )
    configure.add_argument(
        "--path",
        default=None,
        help="Directory to write the environment file to (default: base path)",
    )
    configure.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing environment file",
    )

    serve = subparsers.add_parser("serve", help="Start a development server")
    serve.add_argument("--host", help="The host name or IP address to bind the server to")
    serve.add_argument("--port", help="The port number to listen on")
    serve.add_argument(
        "--docroot",
        default="public",
        help="Directory to serve, relative to the base path (default: public)",
    )

    show = subparsers.add_parser("show", help="Print the variables of an environment file")
    show.add_argument("file", nargs="?", help="Environment file (default: <base path>/.env)")

    check = subparsers.add_parser("check", help="Check that required variables are set")
    check.add_argument("file", nargs="?", help="Environment file (default: <base path>/.env)")
    check.add_argument(
        "--require",
        "-r",
        action="append",
        default=[],
        metavar="KEY",
        help="Required variable (can be used multiple times)",
    )

    return parser


async def _main_async(argv: list[str] | None = None) -> int:
    """Async main function."""
    args = _build_parser().parse_args(argv)

    _configure_logging(args.verbose)
    config = EnvStoreConfig.load(args.config)

    if args.command == "configure":
        return _configure(config, args.env, args.path, args.force)
    if args.command == "serve":
        return await _serve(config, args.host, args.port, args.docroot)
    if args.command == "show":
        return _show(config, args.file)
    return _check(config, args.file, args.require)


def _configure_logging(verbose: int) -> None:
    if verbose <= 0:
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose > 1 else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _base_path(config: EnvStoreConfig) -> Path:
    return Path(config.base_path) if config.base_path else Path.cwd()


def _env_file_location(config: EnvStoreConfig, file: str | None) -> tuple[Path, str]:
    """Split an env file argument into directory and file name."""
    if file is None:
        return _base_path(config), config.env_file

    path = Path(file)
    return path.parent, path.name


def _configure(config: EnvStoreConfig, environment: str | None, path: str | None, force: bool) -> int:
    """Create the environment file from the stub."""
    env_path = (Path(path) if path else _base_path(config)) / config.env_file

    if env_path.exists() and not force:
        rprint(f"[yellow]{env_path} already exists, nothing to do.[/yellow]")
        return 0

    if environment is None:
        for key, label in ENVIRONMENTS.items():
            rprint(f"  [cyan]{key}[/cyan]  {label}")
        environment = Prompt.ask("Choose the environment", choices=list(ENVIRONMENTS), default="dev")

    write_env_file(env_path, environment, force=force)
    rprint("[green]Environment configuration completed successfully.[/green]")

    return 0


async def _serve(config: EnvStoreConfig, host: str | None, port: str | None, docroot: str) -> int:
    """Start the development server."""
    base = _base_path(config)
    store = EnvStore(config)

    env_path = base / config.env_file
    if env_path.exists():
        store.load(base, config.env_file)

    try:
        host, port = resolve_address(store, host, port)
    except ServeError as exc:
        rprint(f"[red]Error: {exc}[/red]")
        return 1

    command = build_command(host, port, base / docroot)

    returncode = await run_server(
        command,
        cwd=base,
        on_start=lambda: rprint(f"[green]Serving requests at http://{host}:{port}[/green]"),
    )

    if returncode:
        rprint(f"[red]Server exited with code {returncode}[/red]")

    return returncode


def _show(config: EnvStoreConfig, file: str | None) -> int:
    """Display the variables of an environment file."""
    directory, file_name = _env_file_location(config, file)
    store = EnvStore()

    try:
        store.load(directory, file_name)
    except EnvFileError as exc:
        rprint(f"[red]Error: {exc}[/red]")
        return 1

    variables = store.all()

    if not variables:
        rprint("[yellow]No variables defined.[/yellow]")
        return 0

    table = Table(title=str(directory / file_name))
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Type", style="yellow")

    for key, value in variables.items():
        table.add_row(key, repr(value), type(value).__name__)

    rprint(table)
    return 0


def _check(config: EnvStoreConfig, file: str | None, required: list[str]) -> int:
    """Check that every required variable is set in an environment file."""
    directory, file_name = _env_file_location(config, file)
    store = EnvStore(replace(config, required=[*config.required, *required], auto_publish=[]))

    try:
        store.load(directory, file_name)
    except (EnvFileError, MissingVariableError) as exc:
        rprint(f"[red]Error: {exc}[/red]")
        return 1

    rprint(f"[green]All {len(store.required)} required variable(s) are set.[/green]")
    return 0
