"""Process-local key-value store backed by a single JSON file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from storefront.infrastructure.persistence.json_files import (
    holding,
    lock_for,
    read_json_object,
    write_json_atomic,
)

WHAT = "local storage"


class JsonKeyValueStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._file_lock = lock_for(file_path)

    def get(self, key: str, default: Any = None) -> Any:
        return read_json_object(self._file_path, WHAT).get(key, default)

    def set(self, key: str, value: Any) -> None:
        with holding(self._file_lock, WHAT):
            data = read_json_object(self._file_path, WHAT)
            data[key] = value
            write_json_atomic(self._file_path, data, WHAT)

    def delete(self, key: str) -> None:
        with holding(self._file_lock, WHAT):
            data = read_json_object(self._file_path, WHAT)
            if data.pop(key, None) is not None:
                write_json_atomic(self._file_path, data, WHAT)
