"""JSON file helpers shared by the file-backed stores.

Writers hold an OS-level lock file next to the data file for the whole
read-modify-write, so CLI invocations running in separate processes are
serialised. Data files are replaced atomically: a reader sees either the
previous or the new content, never a partial write.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from storefront.domain.exceptions import StoreUnavailableError

LOCK_TIMEOUT_SECONDS = 10.0


def lock_for(path: Path) -> FileLock:
    return FileLock(f"{path}.lock", timeout=LOCK_TIMEOUT_SECONDS)


@contextmanager
def holding(lock: FileLock, what: str) -> Iterator[None]:
    try:
        Path(lock.lock_file).parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StoreUnavailableError(f"Cannot lock {what}: {exc}") from exc
    try:
        with lock:
            yield
    except Timeout as exc:
        raise StoreUnavailableError(f"Timed out waiting for the lock on {what}") from exc


def read_json_object(path: Path, what: str) -> dict[str, Any]:
    """Load ``path`` as a JSON object; a missing file is an empty one."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise StoreUnavailableError(f"Cannot read {what}: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreUnavailableError(
            f"Cannot read {what}: expected a JSON object, got {type(data).__name__}"
        )
    return data


def write_json_atomic(path: Path, data: dict[str, Any], what: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
                fh.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise StoreUnavailableError(f"Cannot write {what}: {exc}") from exc
