"""Document-store implementation of the remote CartRepository."""

from __future__ import annotations

import logging

from storefront.domain.exceptions import ConcurrencyConflictError, ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.cart_documents import (
    cart_from_document,
    cart_to_document,
)
from storefront.infrastructure.persistence.document_store import Document, DocumentStore

logger = logging.getLogger(__name__)

CARTS = "carts"


class DocumentCartRepository(CartRepository):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def get(self, owner_id: str) -> Cart | None:
        raw = self._store.get(CARTS, owner_id)
        if raw is None:
            return None
        cart = cart_from_document(raw)
        cart.owner_id = owner_id
        return cart

    def save(self, cart: Cart) -> None:
        if not cart.owner_id:
            raise ValidationError("Guest carts are not stored remotely")

        base_version = cart.version

        def apply(current: Document | None) -> Document | None:
            stored_version = current.get("version", 0) if current is not None else 0
            if stored_version != base_version:
                return None
            doc = cart_to_document(cart)
            doc["version"] = base_version + 1
            doc["userId"] = cart.owner_id
            return doc

        if self._store.update(CARTS, cart.owner_id, apply) is None:
            logger.warning(
                "Rejected stale cart write for %s (base version %d)",
                cart.owner_id, base_version,
            )
            raise ConcurrencyConflictError(
                "Your cart was changed in another session. Reload it and try again."
            )
        cart.version = base_version + 1
