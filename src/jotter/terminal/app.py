# SPDX-License-Identifier: MIT

import typer

from jotter.terminal import configuration, note
from jotter.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="Jotter - personal notes in the terminal",
    no_args_is_help=True,
)
app.add_typer(note.app, name="note, n")
app.add_typer(configuration.app, name="config, c")


def run() -> None:
    app()
