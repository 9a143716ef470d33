"""
Loading stored snapshots that are damaged or were edited by hand.
"""

import pendulum
import pytest

from jotter.errors import NoteDecodeError, StorageWriteError
from jotter.storage.key_value import MemoryKeyValueStore

VALID_RECORD = (
    "- id: 0b6f7b1e-8d1c-4d55-9a43-2c3b0c7c1a10\n"
    "  title: Shopping\n"
    "  content: bread\n"
    "  lastModified: '2024-03-01T10:00:00+00:00'\n"
    "  folder: All Notes\n"
)


def _store_with(raw, reopen):
    backing = MemoryKeyValueStore({"savedNotes": raw})
    return reopen(backing), backing


def test_valid_record_loads(reopen):
    store, _ = _store_with(VALID_RECORD.encode("utf-8"), reopen)

    notes = store.load()

    assert store.load_error is None
    assert notes == [
        {
            "id": "0b6f7b1e-8d1c-4d55-9a43-2c3b0c7c1a10",
            "title": "Shopping",
            "content": "bread",
            "last_modified": pendulum.datetime(2024, 3, 1, 10, tz="UTC"),
            "folder": "All Notes",
        }
    ]


def test_unquoted_timestamp_is_accepted(reopen):
    raw = VALID_RECORD.replace("'2024-03-01T10:00:00+00:00'", "2024-03-01 10:00:00")
    store, _ = _store_with(raw.encode("utf-8"), reopen)

    notes = store.load()

    assert store.load_error is None
    assert notes[0]["last_modified"] == pendulum.datetime(2024, 3, 1, 10, tz="UTC")


def test_other_offsets_are_normalised_to_utc(reopen):
    raw = VALID_RECORD.replace("+00:00", "+02:00")
    store, _ = _store_with(raw.encode("utf-8"), reopen)

    note = store.load()[0]

    assert note["last_modified"] == pendulum.datetime(2024, 3, 1, 8, tz="UTC")
    assert note["last_modified"].timezone_name == "UTC"


def test_extra_keys_are_ignored(reopen):
    raw = VALID_RECORD + "  drawing: some-attachment\n"
    store, _ = _store_with(raw.encode("utf-8"), reopen)

    notes = store.load()

    assert store.load_error is None
    assert "drawing" not in notes[0]


def test_empty_entry_holds_no_notes(reopen):
    store, _ = _store_with(b"", reopen)

    assert store.load() == []
    assert store.load_error is None


@pytest.mark.parametrize(
    "raw",
    [
        b"not: [valid",
        b"\xff\xfe\x00garbage",
        b"{}",
        b"just a string",
        b"- 1\n- 2\n",
        VALID_RECORD.replace("  folder: All Notes\n", "").encode("utf-8"),
        VALID_RECORD.replace("title: Shopping", "title: 42").encode("utf-8"),
        VALID_RECORD.replace("'2024-03-01T10:00:00+00:00'", "'yesterday'").encode(
            "utf-8"
        ),
        VALID_RECORD.replace("'2024-03-01T10:00:00+00:00'", "2024-03-01").encode(
            "utf-8"
        ),
        VALID_RECORD.replace("id: 0b6f7b1e-8d1c-4d55-9a43-2c3b0c7c1a10", "id: ''").encode(
            "utf-8"
        ),
        (VALID_RECORD + VALID_RECORD).encode("utf-8"),
    ],
    ids=[
        "broken-yaml",
        "not-utf8",
        "mapping",
        "scalar",
        "sequence-of-ints",
        "missing-field",
        "non-string-title",
        "bad-timestamp",
        "date-only-timestamp",
        "empty-id",
        "duplicate-id",
    ],
)
def test_unreadable_snapshot_loads_empty_and_reports(raw, reopen, caplog):
    store, _ = _store_with(raw, reopen)

    notes = store.load()

    assert notes == []
    assert isinstance(store.load_error, NoteDecodeError)
    assert "Discarding unreadable notes" in caplog.text


def test_unreadable_snapshot_is_kept_aside(reopen):
    raw = b"not: [valid"
    store, backing = _store_with(raw, reopen)

    store.load()
    store.create(title="fresh start")

    assert backing.get("savedNotes.corrupt") == raw
    assert b"fresh start" in backing.get("savedNotes")
    assert sorted(backing.keys()) == ["savedNotes", "savedNotes.corrupt"]


def test_load_error_clears_after_good_load(reopen):
    store, backing = _store_with(b"{}", reopen)
    store.load()
    assert store.load_error is not None

    backing.set("savedNotes", VALID_RECORD.encode("utf-8"))
    store.load()

    assert store.load_error is None


def test_read_failure_loads_empty(reopen):
    class UnreadableStore(MemoryKeyValueStore):
        def get(self, key):
            raise PermissionError(13, "Permission denied")

    store = reopen(UnreadableStore())

    assert store.load() == []
    assert isinstance(store.load_error, NoteDecodeError)
    assert "Permission denied" in str(store.load_error)


def test_read_failure_refuses_to_overwrite(reopen):
    class ReadsOnSecondTry(MemoryKeyValueStore):
        failures = 0

        def get(self, key):
            if self.failures:
                self.failures -= 1
                raise PermissionError(13, "Permission denied")
            return super().get(key)

    backing = ReadsOnSecondTry()
    reopen(backing).create(title="precious")
    backing.failures = 1
    store = reopen(backing)

    with pytest.raises(StorageWriteError):
        store.create(title="new")

    assert store.list_notes() == []
    assert [n["title"] for n in reopen(backing).load()] == ["precious"]

    store.load()
    store.create(title="new")

    assert [n["title"] for n in reopen(backing).load()] == ["precious", "new"]
