# SPDX-License-Identifier: MIT

"""Byte-valued key-value stores that hold the serialized note snapshot."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Protocol

LOG = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...

    def remove(self, key: str) -> None: ...


def validate_key(key: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise ValueError(
            f"Invalid storage key: {key!r} "
            "(letters, digits, '.', '_' and '-' only, not starting with a separator)"
        )
    return key


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[dict[str, bytes]] = None) -> None:
        self._values: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._values.get(validate_key(key))

    def set(self, key: str, value: bytes) -> None:
        self._values[validate_key(key)] = bytes(value)

    def remove(self, key: str) -> None:
        self._values.pop(validate_key(key), None)

    def keys(self) -> list[str]:
        return list(self._values)


class FileKeyValueStore:
    """
    One file per key inside a directory.

    Writes go to a temporary file next to the target which then replaces it,
    so a reader sees either the previous value or the new one.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / validate_key(key)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(
            dir=self.directory, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as temp_file:
                temp_file.write(value)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        LOG.debug("Wrote %d bytes to %s", len(value), path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
