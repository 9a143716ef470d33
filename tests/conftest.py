from typing import Optional

import pendulum
import pytest

from jotter.repository.note import NoteStore
from jotter.storage.key_value import FileKeyValueStore, MemoryKeyValueStore


class FakeClock:
    """Clock that only moves when a test says so."""

    def __init__(self, start: Optional[pendulum.DateTime] = None) -> None:
        self.current = start or pendulum.datetime(2024, 1, 1, 9, 30, tz="UTC")

    def __call__(self) -> pendulum.DateTime:
        return self.current

    def advance(self, **kwargs: int) -> pendulum.DateTime:
        self.current = self.current.add(**kwargs)
        return self.current


class FlakyKeyValueStore(MemoryKeyValueStore):
    """Memory store whose writes can be made to fail like a full disk."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.writes = 0

    def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise OSError(28, "No space left on device")
        self.writes += 1
        super().set(key, value)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backing() -> FlakyKeyValueStore:
    return FlakyKeyValueStore()


@pytest.fixture
def file_backing(tmp_path) -> FileKeyValueStore:
    return FileKeyValueStore(tmp_path / "data")


def make_store(backing, clock) -> NoteStore:
    return NoteStore(
        backing=backing,
        key="savedNotes",
        default_title="New Note",
        default_folder="All Notes",
        clock=clock,
    )


@pytest.fixture
def store(backing, clock) -> NoteStore:
    return make_store(backing, clock)


@pytest.fixture
def reopen(backing, clock):
    """Build a fresh store over the same bytes, like a second app launch."""

    def _reopen(source=None) -> NoteStore:
        return make_store(source if source is not None else backing, clock)

    return _reopen
