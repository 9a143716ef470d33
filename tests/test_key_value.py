import os

import pytest

from jotter.storage.key_value import FileKeyValueStore, MemoryKeyValueStore


@pytest.fixture(params=["memory", "file"])
def kv(request, tmp_path):
    if request.param == "memory":
        return MemoryKeyValueStore()
    return FileKeyValueStore(tmp_path / "kv")


def test_missing_key_is_none(kv):
    assert kv.get("savedNotes") is None


def test_set_then_get(kv):
    kv.set("savedNotes", b"- first\n")
    kv.set("savedNotes", b"- second\n")

    assert kv.get("savedNotes") == b"- second\n"


def test_remove(kv):
    kv.set("savedNotes", b"x")
    kv.remove("savedNotes")
    kv.remove("savedNotes")

    assert kv.get("savedNotes") is None


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden", "with space"])
def test_rejects_unsafe_keys(kv, key):
    with pytest.raises(ValueError):
        kv.set(key, b"x")


def test_file_store_leaves_no_temporary_files(tmp_path):
    kv = FileKeyValueStore(tmp_path / "kv")

    kv.set("savedNotes", b"one")
    kv.set("savedNotes", b"two")

    assert sorted(os.listdir(tmp_path / "kv")) == ["savedNotes"]


def test_file_store_failed_replace_keeps_old_value(tmp_path, monkeypatch):
    kv = FileKeyValueStore(tmp_path / "kv")
    kv.set("savedNotes", b"old")

    def refuse(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", refuse)

    with pytest.raises(OSError):
        kv.set("savedNotes", b"new")

    monkeypatch.undo()
    assert kv.get("savedNotes") == b"old"
    assert sorted(os.listdir(tmp_path / "kv")) == ["savedNotes"]
