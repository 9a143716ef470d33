# SPDX-License-Identifier: MIT

"""Failure kinds raised by the note store."""


class NoteStoreError(Exception):
    """Base class for every error the note store raises."""


class NoteDecodeError(NoteStoreError):
    """Stored bytes are present but are not a valid note sequence."""


class NoteNotFoundError(NoteStoreError, KeyError):
    def __init__(self, note_id: str) -> None:
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"note not found: {self.note_id}"


class StorageWriteError(NoteStoreError):
    """The backing store rejected a write, or the snapshot could not be encoded."""


class SessionClosedError(NoteStoreError):
    pass
