"""crud-strategy CLI.

Commands:
    crud-strategy serve      run the HTTP server
    crud-strategy config     print the resolved settings as YAML

Every option falls back to its 'CRUD_STRATEGY_<KEY>' environment variable, then
to the YAML config file, then to the built-in default (see settings.py).
"""

import io
from pathlib import Path
from typing import Any

import click
import uvicorn
from loguru import logger

from crud_strategy_pattern import APP_NAME, __version__
from crud_strategy_pattern.app import create_app
from crud_strategy_pattern.logging_setup import setup_logging, uvicorn_log_level
from crud_strategy_pattern.settings import (
    Settings,
    SettingsError,
    StorageBackend,
    resolve_config_path,
    resolve_settings,
    write_settings,
)


def _resolve(ctx: click.Context, **cli_values: Any) -> Settings:
    try:
        return resolve_settings(
            {"verbosity": ctx.obj["verbosity"], **cli_values},
            config_path=ctx.obj["config_path"],
        )
    except SettingsError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.version_option(version=__version__, prog_name=APP_NAME)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: ~/.config/crud-strategy-pattern/default.yaml)",
)
@click.option(
    "-v",
    "--verbosity",
    default=None,
    help="Log level: off, error, warning, info, debug, trace",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbosity: str | None) -> None:
    """Serve accounts from a pluggable CSV or SQLite store."""
    ctx.obj = {"config_path": resolve_config_path(config_path), "verbosity": verbosity}


@cli.command()
@click.option("-a", "--address", default=None, help="IP address to bind the HTTP server to")
@click.option("-p", "--port", type=int, default=None, help="Port to run the HTTP server on")
@click.option(
    "-b",
    "--backend",
    type=click.Choice([backend.value for backend in StorageBackend]),
    default=None,
    help="Storage backend",
)
@click.option(
    "-s",
    "--storage-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Data file (default: accounts.csv / accounts.sqlite in the working directory)",
)
@click.pass_context
def serve(
    ctx: click.Context,
    address: str | None,
    port: int | None,
    backend: str | None,
    storage_path: Path | None,
) -> None:
    """Run the web server."""
    settings = _resolve(ctx, address=address, port=port, backend=backend, storage_path=storage_path)
    level = setup_logging(settings.verbosity)
    logger.debug(f"Settings: {settings!r}")
    app = create_app(settings)
    logger.info(f"Running HTTP server at http://{settings.address}:{settings.port}")
    uvicorn.run(app, host=settings.address, port=settings.port, log_level=uvicorn_log_level(level))


@cli.command("config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Print the resolved settings as YAML."""
    settings = _resolve(ctx)
    setup_logging(settings.verbosity)
    buffer = io.StringIO()
    write_settings(buffer, settings)
    click.echo(buffer.getvalue(), nl=False)
