# SPDX-License-Identifier: MIT

import os
import subprocess
import tempfile
from typing import Optional

import typer

from jotter.model.entity_id import NoteId
from jotter.repository.note import NoteStore


def parse_note_id(store: NoteStore, id_param: str) -> NoteId:
    """
    Resolve a full note id or a unique prefix of one.

    Raises:
        typer.BadParameter: If nothing or more than one note matches
    """
    id_param = id_param.strip()
    if not id_param:
        raise typer.BadParameter("No note id provided")

    ids = [note["id"] for note in store.list_notes()]
    if id_param in ids:
        return id_param

    # Stored ids keep their case, matching ignores it
    prefix = id_param.casefold()
    candidates = [note_id for note_id in ids if note_id.casefold().startswith(prefix)]
    if len(candidates) == 0:
        raise typer.BadParameter(f"No note matches id '{id_param}'")
    if len(candidates) > 1:
        raise typer.BadParameter(
            f"Id '{id_param}' is ambiguous, it matches {len(candidates)} notes"
        )
    return candidates[0]


def open_editor_for_text(initial_text: Optional[str] = None) -> Optional[str]:
    """
    Open the user's preferred editor to edit note text.
    Returns the edited text with trailing newlines removed, or None if empty.
    """
    # Get the editor from environment, default to nano
    editor = os.environ.get("EDITOR", "nano")

    with tempfile.NamedTemporaryFile(mode="w+", suffix=".txt") as tf:
        if initial_text is not None:
            tf.write(initial_text)
            tf.flush()

        subprocess.run([editor, tf.name], check=True)
        tf.seek(0)
        text = tf.read()
        if not text.strip():
            return None
        # Remove trailing newlines but preserve internal empty lines
        return text.rstrip("\n")
