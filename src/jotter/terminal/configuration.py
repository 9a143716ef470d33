# SPDX-License-Identifier: MIT

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jotter import configuration
from jotter.repository.configuration import CONFIGURATION_REPO
from jotter.storage.key_value import validate_key
from jotter.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@app.command("show, v")
def show() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("config_path", escape(str(configuration.APP_CONFIG_PATH)))
    table.add_row("data_path", escape(str(configuration.DATA_PATH)))
    table.add_row("log_file", escape(str(configuration.LOG_FILE_PATH)))
    table.add_row("storage_key", escape(config["storage_key"]))
    table.add_row("default_title", escape(config["default_title"]))
    table.add_row("default_folder", escape(config["default_folder"]))
    table.add_row("log_level", config["log_level"])

    console.print(table)


@app.command("set, s")
def set(
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="directory holding the notes"),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option("--remove-data-path", help="go back to the platform default"),
    ] = False,
    storage_key: Annotated[Optional[str], typer.Option("--storage-key")] = None,
    default_title: Annotated[Optional[str], typer.Option("--default-title")] = None,
    default_folder: Annotated[Optional[str], typer.Option("--default-folder")] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"),
    ] = None,
) -> None:
    """Change configuration settings."""
    if storage_key is not None:
        try:
            validate_key(storage_key)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--storage-key")
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(
            f"Unknown log level '{log_level}'", param_hint="--log-level"
        )

    CONFIGURATION_REPO.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        storage_key=storage_key,
        default_title=default_title,
        default_folder=default_folder,
        log_level=log_level,
    )
    CONFIGURATION_REPO.flush()

    if log_level is not None:
        logging.getLogger("jotter").setLevel(log_level.upper())

    typer.echo("Configuration updated")
