"""Object store on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import unquote

from storefront.application.ports import ObjectStore
from storefront.domain.exceptions import StoreUnavailableError, ValidationError

logger = logging.getLogger(__name__)


class LocalObjectStore(ObjectStore):
    """Stores blobs under ``root``.

    Public URLs are ``public_base_url`` + path when a base URL is
    configured, otherwise ``file://`` URIs.
    """

    def __init__(self, root: Path, public_base_url: str | None = None) -> None:
        self._root = root
        self._public_base_url = public_base_url

    def put(self, path: str, data: bytes) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot store object '{path}': {exc}") from exc
        logger.debug("Stored %d byte(s) at %s", len(data), path)
        return path

    def public_url(self, path: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{path}"
        return self._resolve(path).resolve().as_uri()

    def delete(self, path: str) -> None:
        try:
            self._resolve(path).unlink(missing_ok=True)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot delete object '{path}': {exc}") from exc

    def path_for_url(self, url: str) -> str | None:
        if self._public_base_url:
            prefix = self._public_base_url.rstrip("/") + "/"
        else:
            prefix = self._root.resolve().as_uri() + "/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):]) or None

    def _resolve(self, path: str) -> Path:
        parts = PurePosixPath(path).parts
        if not parts or path.startswith("/") or ".." in parts:
            raise ValidationError(f"Invalid object path '{path}'")
        return self._root.joinpath(*parts)
