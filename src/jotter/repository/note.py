# SPDX-License-Identifier: MIT

import datetime
import logging
from copy import deepcopy
from typing import Any, Callable, Optional, TypeAlias

from yaml import YAMLError, dump, load

try:
    from yaml import CSafeDumper as Dumper
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import SafeDumper as Dumper  # type: ignore[assignment]
    from yaml import SafeLoader as Loader  # type: ignore[assignment]

import pendulum

from jotter import configuration
from jotter.errors import NoteDecodeError, NoteNotFoundError, StorageWriteError
from jotter.model.entity_id import NoteId, generate_note_id
from jotter.model.note import Note
from jotter.repository.configuration import CONFIGURATION_REPO
from jotter.service.search import filter_notes
from jotter.storage.key_value import FileKeyValueStore, KeyValueStore, validate_key
from jotter.template.note import get_note_template
from jotter.time import (
    datetime_from_str,
    datetime_to_iso_str,
    now_utc,
    python_to_pendulum_utc,
)

LOG = logging.getLogger(__name__)

Subscriber: TypeAlias = Callable[[list[Note]], None]

# Field names of a stored record
RECORD_FIELDS = ("id", "title", "content", "lastModified", "folder")
TEXT_FIELDS = ("id", "title", "content", "folder")

CORRUPT_SUFFIX = ".corrupt"


class LiteralString(str):
    """String subclass to trigger literal block scalar style in YAML."""

    pass


def literal_string_representer(dumper: Any, data: str) -> Any:
    """YAML representer for literal block scalar (|) style."""
    # The emitter picks the chomping indicator, so the text round-trips as is
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style="|")


Dumper.add_representer(LiteralString, literal_string_representer)


class NoteStore:
    """
    Sole owner of the note collection.

    Every successful mutation is written to the backing store before the
    call returns. Callers only ever get copies of notes, and hand changes
    back through update().
    """

    def __init__(
        self,
        backing: Optional[KeyValueStore] = None,
        key: Optional[str] = None,
        default_title: Optional[str] = None,
        default_folder: Optional[str] = None,
        clock: Callable[[], pendulum.DateTime] = now_utc,
    ) -> None:
        self._backing = backing
        self._key = validate_key(key) if key is not None else None
        self._default_title = default_title
        self._default_folder = default_folder
        self._clock = clock
        self._notes: Optional[list[Note]] = None
        self._subscribers: list[Subscriber] = []
        self.load_error: Optional[NoteDecodeError] = None
        # Set while the stored entry could not be read at all
        self._read_failed = False

    @property
    def backing(self) -> KeyValueStore:
        if self._backing is None:
            self._backing = FileKeyValueStore(configuration.DATA_PATH)
        return self._backing

    @property
    def key(self) -> str:
        if self._key is None:
            self._key = validate_key(CONFIGURATION_REPO.get_config()["storage_key"])
        return self._key

    @property
    def default_title(self) -> str:
        if self._default_title is None:
            self._default_title = CONFIGURATION_REPO.get_config()["default_title"]
        return self._default_title

    @property
    def default_folder(self) -> str:
        if self._default_folder is None:
            self._default_folder = CONFIGURATION_REPO.get_config()["default_folder"]
        return self._default_folder

    @property
    def notes(self) -> list[Note]:
        if self._notes is None:
            self.load()
        if self._notes is None:
            raise ValueError()
        return self._notes

    def load(self) -> list[Note]:
        """
        Replace the in-memory collection with the persisted one.

        A missing entry gives an empty collection. An unreadable entry also
        gives an empty collection: the failure is logged, kept in
        `load_error`, and the raw bytes are copied aside under
        `<key>.corrupt` so that the next write cannot destroy them. When the
        entry cannot be read at all, writes are refused until a later load
        succeeds.
        """
        self.load_error = None
        self._read_failed = False
        notes: list[Note] = []

        try:
            raw = self.backing.get(self.key)
        except OSError as e:
            raw = None
            self._read_failed = True
            self.load_error = NoteDecodeError(f"could not read {self.key!r}: {e}")
            LOG.warning("Starting with no notes: %s", self.load_error)

        if raw is not None:
            try:
                notes = self.__decode(raw)
            except NoteDecodeError as e:
                self.load_error = e
                LOG.warning("Discarding unreadable notes under %r: %s", self.key, e)
                self.__preserve_unreadable(raw)

        self._notes = notes
        LOG.debug("Loaded %d notes from %r", len(notes), self.key)
        self.__notify()
        return deepcopy(notes)

    def list_notes(
        self, query: Optional[str] = None, folder: Optional[str] = None
    ) -> list[Note]:
        """
        Notes whose title or content contains `query`, ignoring case.

        No query returns every note. Insertion order is kept either way.
        """
        return deepcopy(filter_notes(self.notes, query, folder))

    def get_note(self, note_id: NoteId) -> Note:
        index = self.__index_of(note_id)
        if index is None:
            raise NoteNotFoundError(note_id)
        return deepcopy(self.notes[index])

    def create(
        self,
        title: Optional[str] = None,
        content: str = "",
        folder: Optional[str] = None,
    ) -> Note:
        note = get_note_template(
            id=generate_note_id({note["id"] for note in self.notes}),
            last_modified=self._clock(),
            title=self.default_title if title is None else title,
            content=content,
            folder=self.default_folder if folder is None else folder,
        )
        self.__validate(note)

        previous = list(self.notes)
        self.notes.append(note)
        self.__commit(previous)

        LOG.info("Created note %s", note["id"])
        return deepcopy(note)

    def update(self, note: Note) -> bool:
        """
        Replace the stored note carrying the same id with `note`.

        The whole value is replaced, so callers carry unchanged fields over
        themselves. `last_modified` is always set by the store. Returns False,
        leaving everything untouched, when no note has that id.
        """
        self.__validate(note)

        index = self.__index_of(note["id"])
        if index is None:
            LOG.debug("Ignoring update of unknown note %s", note["id"])
            return False

        current = self.notes[index]
        updated = get_note_template(
            id=current["id"],
            last_modified=max(self._clock(), current["last_modified"]),
            title=note["title"],
            content=note["content"],
            folder=note["folder"],
        )

        previous = list(self.notes)
        self.notes[index] = updated
        self.__commit(previous)

        LOG.info("Updated note %s", updated["id"])
        return True

    def delete(self, note_id: NoteId) -> bool:
        index = self.__index_of(note_id)
        if index is None:
            LOG.debug("Ignoring delete of unknown note %s", note_id)
            return False

        previous = list(self.notes)
        del self.notes[index]
        self.__commit(previous)

        LOG.info("Deleted note %s", note_id)
        return True

    def persist(self) -> None:
        """Write the full collection under the store key in a single call."""
        notes = self.notes
        if self._read_failed:
            LOG.error("Refusing to overwrite %r, it was never read", self.key)
            raise StorageWriteError(
                f"notes under {self.key!r} could not be read; load them again "
                "before writing"
            )

        try:
            blob = self.__encode(notes)
        except (YAMLError, TypeError, ValueError) as e:
            LOG.error("Could not encode %d notes: %s", len(notes), e)
            raise StorageWriteError(f"could not encode notes: {e}") from e

        try:
            self.backing.set(self.key, blob)
        except OSError as e:
            LOG.error("Could not write notes under %r: %s", self.key, e)
            raise StorageWriteError(
                f"could not write notes to {self.key!r}: {e}"
            ) from e

        LOG.debug("Persisted %d notes under %r", len(notes), self.key)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register `callback` for a snapshot after every change.

        Returns a function that removes the registration again.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __commit(self, previous: list[Note]) -> None:
        # Memory must not run ahead of storage: undo the change if the write fails
        try:
            self.persist()
        except StorageWriteError:
            self._notes = previous
            raise
        self.__notify()

    def __notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(deepcopy(self.notes))
            except Exception:
                LOG.exception("Note subscriber %r failed", callback)

    def __index_of(self, note_id: NoteId) -> Optional[int]:
        for index, note in enumerate(self.notes):
            if note["id"] == note_id:
                return index
        return None

    def __validate(self, note: Note) -> None:
        for field in TEXT_FIELDS:
            if field not in note:
                raise ValueError(f"Note is missing field '{field}'")
            if not isinstance(note[field], str):  # type: ignore[literal-required]
                raise ValueError(f"Note field '{field}' must be a string")
        if not note["id"]:
            raise ValueError("Note id cannot be empty")

    def __preserve_unreadable(self, raw: bytes) -> None:
        corrupt_key = self.key + CORRUPT_SUFFIX
        try:
            self.backing.set(corrupt_key, raw)
        except OSError as e:
            LOG.error("Could not keep unreadable notes under %r: %s", corrupt_key, e)
            return
        LOG.warning("Kept unreadable notes under %r", corrupt_key)

    def __encode(self, notes: list[Note]) -> bytes:
        records = [self.__convert_note_for_serialization(note) for note in notes]
        return dump(
            records, Dumper=Dumper, allow_unicode=True, sort_keys=False
        ).encode("utf-8")

    def __decode(self, raw: bytes) -> list[Note]:
        try:
            data = load(raw.decode("utf-8"), Loader=Loader)
        except (UnicodeDecodeError, YAMLError) as e:
            raise NoteDecodeError(f"not a YAML document: {e}") from e

        # An empty entry holds no notes
        if data is None:
            return []
        if not isinstance(data, list):
            raise NoteDecodeError(
                f"expected a sequence of notes, got {type(data).__name__}"
            )

        notes: list[Note] = []
        seen: set[NoteId] = set()
        for index, record in enumerate(data):
            note = self.__convert_note_for_deserialization(index, record)
            if note["id"] in seen:
                raise NoteDecodeError(f"note {index}: duplicate id {note['id']!r}")
            seen.add(note["id"])
            notes.append(note)
        return notes

    def __convert_note_for_serialization(self, note: Note) -> dict[str, Any]:
        content = note["content"]
        return {
            "id": note["id"],
            "title": note["title"],
            # Multi-line text is easier to read as a block scalar
            "content": LiteralString(content) if "\n" in content else content,
            "lastModified": datetime_to_iso_str(note["last_modified"]),
            "folder": note["folder"],
        }

    def __convert_note_for_deserialization(self, index: int, record: Any) -> Note:
        if not isinstance(record, dict):
            raise NoteDecodeError(
                f"note {index}: expected a mapping, got {type(record).__name__}"
            )

        missing = [field for field in RECORD_FIELDS if field not in record]
        if missing:
            raise NoteDecodeError(f"note {index}: missing {', '.join(missing)}")
        for field in TEXT_FIELDS:
            if not isinstance(record[field], str):
                raise NoteDecodeError(f"note {index}: '{field}' must be a string")
        if not record["id"]:
            raise NoteDecodeError(f"note {index}: empty id")

        last_modified = record["lastModified"]
        try:
            # Hand-edited files may hold unquoted timestamps the loader resolved
            if isinstance(last_modified, datetime.datetime):
                parsed = python_to_pendulum_utc(last_modified)
            elif isinstance(last_modified, str):
                parsed = datetime_from_str(last_modified)
            else:
                raise ValueError(f"unsupported value {last_modified!r}")
        except ValueError as e:
            raise NoteDecodeError(f"note {index}: bad lastModified: {e}") from e

        return get_note_template(
            id=record["id"],
            last_modified=parsed,
            title=record["title"],
            content=record["content"],
            folder=record["folder"],
        )

    # Defined last so the annotations above still refer to the builtin
    list = list_notes


NOTE_STORE = NoteStore()
