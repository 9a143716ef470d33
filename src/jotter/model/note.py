# SPDX-License-Identifier: MIT

from typing import TypedDict

import pendulum

from jotter.model.entity_id import NoteId


class Note(TypedDict):
    id: NoteId
    title: str
    content: str
    last_modified: pendulum.DateTime
    folder: str
