# SPDX-License-Identifier: MIT

import pendulum

from jotter.model.entity_id import NoteId
from jotter.model.note import Note

DEFAULT_TITLE = "New Note"
DEFAULT_FOLDER = "All Notes"


def get_note_template(
    id: NoteId,
    last_modified: pendulum.DateTime,
    title: str = DEFAULT_TITLE,
    content: str = "",
    folder: str = DEFAULT_FOLDER,
) -> Note:
    return {
        "id": id,
        "title": title,
        "content": content,
        "last_modified": last_modified,
        "folder": folder,
    }
