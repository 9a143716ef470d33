# SPDX-License-Identifier: MIT

import logging
from types import TracebackType
from typing import Any, Optional

from jotter.errors import NoteNotFoundError, SessionClosedError
from jotter.model.entity_id import NoteId
from jotter.model.note import Note
from jotter.repository.note import NoteStore

LOG = logging.getLogger(__name__)


class EditingSession:
    """
    Working copy of one note while it is being edited.

    Edits stay local until save(). Leaving the `with` block saves whatever
    changed, whether the block finished normally or raised.

        with EditingSession(store, note_id) as session:
            session.title = "Groceries"
            session.content = "milk, eggs"
    """

    def __init__(self, store: NoteStore, note_id: NoteId) -> None:
        self._store = store
        self._saved = store.get_note(note_id)
        self._working: dict[str, Any] = dict(self._saved)
        self._closed = False

    @property
    def note_id(self) -> NoteId:
        return self._saved["id"]

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def title(self) -> str:
        return self._working["title"]

    @title.setter
    def title(self, value: str) -> None:
        self.__set("title", value)

    @property
    def content(self) -> str:
        return self._working["content"]

    @content.setter
    def content(self, value: str) -> None:
        self.__set("content", value)

    @property
    def folder(self) -> str:
        return self._working["folder"]

    @folder.setter
    def folder(self, value: str) -> None:
        self.__set("folder", value)

    @property
    def has_changes(self) -> bool:
        return any(
            self._working[field] != self._saved[field]  # type: ignore[literal-required]
            for field in ("title", "content", "folder")
        )

    def save(self) -> bool:
        """Push the working copy to the store. Returns False if nothing changed."""
        self.__ensure_open()
        if not self.has_changes:
            return False

        note: Note = {
            "id": self._saved["id"],
            "title": self._working["title"],
            "content": self._working["content"],
            "last_modified": self._saved["last_modified"],
            "folder": self._working["folder"],
        }
        if not self._store.update(note):
            raise NoteNotFoundError(self.note_id)

        self._saved = self._store.get_note(self.note_id)
        self._working = dict(self._saved)
        LOG.debug("Saved editing session for note %s", self.note_id)
        return True

    def close(self) -> None:
        if self._closed:
            return
        try:
            self.save()
        finally:
            self._closed = True

    def __enter__(self) -> "EditingSession":
        self.__ensure_open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def __set(self, field: str, value: str) -> None:
        self.__ensure_open()
        if not isinstance(value, str):
            raise ValueError(f"Note field '{field}' must be a string")
        self._working[field] = value

    def __ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"editing session for {self.note_id} is closed")
