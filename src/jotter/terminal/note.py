# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from jotter.errors import NoteStoreError
from jotter.repository.note import CORRUPT_SUFFIX, NOTE_STORE
from jotter.service.session import EditingSession
from jotter.terminal.custom_typer import AliasedTyperGroup
from jotter.terminal.parse import open_editor_for_text, parse_note_id
from jotter.view import note as note_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def __warn_on_load_error() -> None:
    # accessing notes triggers the lazy load
    NOTE_STORE.notes
    if NOTE_STORE.load_error is not None:
        console = Console(stderr=True)
        console.print(
            f"[yellow]Warning: stored notes could not be read "
            f"({escape(str(NOTE_STORE.load_error))}); the unreadable data was kept "
            f"under '{escape(NOTE_STORE.key + CORRUPT_SUFFIX)}'[/yellow]",
            soft_wrap=True,
        )


def __fail(message: str) -> typer.Exit:
    console = Console(stderr=True)
    console.print(f"[red]Error: {escape(message)}[/red]", soft_wrap=True)
    return typer.Exit(1)


@app.command("add, a")
def add(
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    content: Annotated[
        Optional[str],
        typer.Option("--content", "-c", help="Opens $EDITOR when omitted"),
    ] = None,
    folder: Annotated[Optional[str], typer.Option("--folder", "-f")] = None,
) -> None:
    """Create a note. Title and folder fall back to the configured defaults."""
    __warn_on_load_error()

    if content is None:
        content = open_editor_for_text()

    try:
        note = NOTE_STORE.create(title=title, content=content or "", folder=folder)
    except NoteStoreError as e:
        raise __fail(str(e))

    note_report.single_note_report(note)


@app.command("list, ls")
def list_notes(
    search: Annotated[
        Optional[str],
        typer.Option(
            "--search", "-s", help="case-insensitive match on title or content"
        ),
    ] = None,
    folder: Annotated[Optional[str], typer.Option("--folder", "-f")] = None,
    no_wrap: Annotated[bool, typer.Option("--no-wrap", "-nw")] = False,
) -> None:
    """List notes in the order they were created."""
    __warn_on_load_error()

    notes = NOTE_STORE.list_notes(search, folder)
    report_name = "notes" if not search else f"notes matching '{search}'"
    note_report.notes_report(report_name, notes, no_wrap=no_wrap)


@app.command("show, s", no_args_is_help=True)
def show(id: str) -> None:
    note_id = parse_note_id(NOTE_STORE, id)
    try:
        note = NOTE_STORE.get_note(note_id)
    except NoteStoreError as e:
        raise __fail(str(e))
    note_report.single_note_report(note)


@app.command("edit, e", no_args_is_help=True)
def edit(
    id: str,
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    content: Annotated[Optional[str], typer.Option("--content", "-c")] = None,
    folder: Annotated[Optional[str], typer.Option("--folder", "-f")] = None,
) -> None:
    """Edit a note. Without any option the content opens in $EDITOR."""
    note_id = parse_note_id(NOTE_STORE, id)

    try:
        with EditingSession(NOTE_STORE, note_id) as session:
            if title is None and content is None and folder is None:
                session.content = open_editor_for_text(session.content) or ""
            if title is not None:
                session.title = title
            if content is not None:
                session.content = content
            if folder is not None:
                session.folder = folder
            changed = session.has_changes
    except NoteStoreError as e:
        raise __fail(str(e))

    if not changed:
        typer.echo("No changes")
    note_report.single_note_report(NOTE_STORE.get_note(note_id))


@app.command("delete, rm", no_args_is_help=True)
def delete(id: str) -> None:
    note_id = parse_note_id(NOTE_STORE, id)
    try:
        deleted = NOTE_STORE.delete(note_id)
    except NoteStoreError as e:
        raise __fail(str(e))

    if not deleted:
        raise __fail(f"note not found: {note_id}")
    typer.echo(f"Deleted note {note_id}")
