"""LocalCartStore over the process-local key-value store."""

from __future__ import annotations

from storefront.domain.model.cart import Cart
from storefront.domain.repository.cart_repository import LocalCartStore
from storefront.infrastructure.persistence.cart_documents import (
    cart_from_document,
    cart_to_document,
)
from storefront.infrastructure.persistence.key_value_store import JsonKeyValueStore


class KeyValueCartStore(LocalCartStore):

    def __init__(self, kv_store: JsonKeyValueStore) -> None:
        self._kv = kv_store

    def get(self, key: str) -> Cart | None:
        raw = self._kv.get(key)
        return cart_from_document(raw) if raw is not None else None

    def save(self, key: str, cart: Cart) -> None:
        self._kv.set(key, cart_to_document(cart))

    def delete(self, key: str) -> None:
        self._kv.delete(key)
