"""Key-addressed document store.

Documents are JSON-shaped dicts keyed by an opaque id inside a named
collection. ``update`` is the only multi-step primitive: it reads,
transforms and writes one document while holding the collection lock, which
is what conditional stock decrements and versioned cart writes rely on.
"""

from __future__ import annotations

import copy
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock

from storefront.domain.exceptions import StoreUnavailableError
from storefront.infrastructure.persistence.json_files import (
    holding,
    lock_for,
    read_json_object,
    write_json_atomic,
)

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Mutator = Callable[[Document | None], Document | None]


class DocumentStore(ABC):

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Document | None:
        """Return a copy of the document, or None if absent."""

    @abstractmethod
    def put(self, collection: str, doc_id: str, doc: Document) -> None:
        """Create or fully replace a document."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[tuple[str, Document]]:
        """Return ``(doc_id, doc)`` pairs whose fields equal ``filters``."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. Missing documents are ignored."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, mutator: Mutator) -> Document | None:
        """Atomically replace a document with ``mutator(current)``.

        ``current`` is None for a missing document. When the mutator
        returns None nothing is written and None is returned; otherwise
        the written document is returned.
        """

    def new_id(self) -> str:
        return secrets.token_hex(10)


class JsonDocumentStore(DocumentStore):
    """One JSON file per collection under ``root``.

    Every file holds an object mapping document ids to documents. Writes
    to a collection are serialised across threads by an ``RLock`` and
    across processes by a lock file beside the collection file.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._lock = threading.RLock()
        self._file_locks: dict[str, FileLock] = {}

    # --- DocumentStore interface ----------------------------------------------

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._lock:
            doc = self._load(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def put(self, collection: str, doc_id: str, doc: Document) -> None:
        with self._writing(collection):
            docs = self._load(collection)
            docs[doc_id] = copy.deepcopy(doc)
            self._persist(collection, docs)

    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[tuple[str, Document]]:
        with self._lock:
            docs = self._load(collection)

        matches = [
            (doc_id, copy.deepcopy(doc))
            for doc_id, doc in docs.items()
            if all(doc.get(field) == value for field, value in (filters or {}).items())
        ]
        if order_by is not None:
            matches.sort(key=lambda pair: pair[1].get(order_by) or "", reverse=descending)
        if limit is not None:
            matches = matches[:limit]
        return matches

    def delete(self, collection: str, doc_id: str) -> None:
        with self._writing(collection):
            docs = self._load(collection)
            if docs.pop(doc_id, None) is not None:
                self._persist(collection, docs)

    def update(self, collection: str, doc_id: str, mutator: Mutator) -> Document | None:
        with self._writing(collection):
            docs = self._load(collection)
            current = docs.get(doc_id)
            new_doc = mutator(copy.deepcopy(current) if current is not None else None)
            if new_doc is None:
                return None
            docs[doc_id] = new_doc
            self._persist(collection, docs)
            return copy.deepcopy(new_doc)

    # --- File helpers ---------------------------------------------------------

    def _path(self, collection: str) -> Path:
        return self._root / f"{collection}.json"

    @contextmanager
    def _writing(self, collection: str) -> Iterator[None]:
        with self._lock:
            file_lock = self._file_locks.get(collection)
            if file_lock is None:
                file_lock = self._file_locks[collection] = lock_for(self._path(collection))
            with holding(file_lock, f"collection '{collection}'"):
                yield

    def _load(self, collection: str) -> dict[str, Document]:
        docs = read_json_object(self._path(collection), f"collection '{collection}'")
        malformed = [doc_id for doc_id, doc in docs.items() if not isinstance(doc, dict)]
        if malformed:
            raise StoreUnavailableError(
                f"Collection '{collection}' holds malformed document(s): "
                + ", ".join(malformed)
            )
        return docs

    def _persist(self, collection: str, docs: dict[str, Document]) -> None:
        write_json_atomic(self._path(collection), docs, f"collection '{collection}'")
        logger.debug("Wrote %d document(s) to collection %s", len(docs), collection)
