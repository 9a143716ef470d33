# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jotter.model.note import Note
from jotter.time import datetime_to_display_local_datetime_str

SHORT_ID_LENGTH = 8


def short_id(note: Note) -> str:
    return note["id"][:SHORT_ID_LENGTH]


def first_line(text: str) -> str:
    for line in text.split("\n"):
        if line.strip():
            return line.strip()
    return ""


def notes_report(
    report_name: str,
    notes: list[Note],
    columns: list[str] = ["id", "title", "folder", "first_line", "last_modified"],
    no_wrap: bool = False,
) -> None:
    console = Console()

    notes_table = Table(box=box.SIMPLE, title=report_name, title_justify="left")
    for column in columns:
        if no_wrap and column != "id":
            notes_table.add_column(column, no_wrap=True, overflow="ellipsis")
        else:
            notes_table.add_column(column)

    for note in notes:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = short_id(note)
            elif column == "first_line":
                column_value = first_line(note["content"])
            elif column == "last_modified":
                column_value = datetime_to_display_local_datetime_str(
                    note["last_modified"]
                )
            else:
                column_value = str(note[column])  # type: ignore[literal-required]
            row.append(escape(column_value))
        notes_table.add_row(*row)

    console.print(notes_table)
    if len(notes) == 0:
        console.print("[dim]no notes[/dim]")


def single_note_report(note: Note) -> None:
    note_table = Table(box=box.SIMPLE)
    note_table.add_column("property")
    note_table.add_column("value")

    note_table.add_row("id", note["id"])
    note_table.add_row("title", escape(note["title"]))
    note_table.add_row("folder", escape(note["folder"]))
    note_table.add_row(
        "last_modified", datetime_to_display_local_datetime_str(note["last_modified"])
    )

    console = Console()
    console.print(note_table)

    if note["content"] != "":
        panel = Panel(
            Text(note["content"]), title=escape(note["title"]), border_style="blue"
        )
        console.print(panel)
