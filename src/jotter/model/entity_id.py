# SPDX-License-Identifier: MIT

import uuid
from collections.abc import Container
from typing import TypeAlias

NoteId: TypeAlias = str


def generate_note_id(taken: Container[NoteId] = ()) -> NoteId:
    note_id = str(uuid.uuid4())
    while note_id in taken:
        note_id = str(uuid.uuid4())
    return note_id
