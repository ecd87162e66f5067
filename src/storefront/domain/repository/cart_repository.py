"""Abstract repositories for carts.

``CartRepository`` is the remote, identity-scoped store and is the
authority for cart versions. ``LocalCartStore`` is the process-local
key-value copy used for guest carts and as a cache of identity carts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get(self, owner_id: str) -> Cart | None:
        """Return the stored cart for an identity, or None."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a cart owned by an identity.

        The write is accepted only if the stored version still equals
        ``cart.version``; on success ``cart.version`` is advanced.
        Raises ConcurrencyConflictError otherwise.
        """


class LocalCartStore(ABC):

    @abstractmethod
    def get(self, key: str) -> Cart | None:
        """Return the cart stored under ``key``, or None."""

    @abstractmethod
    def save(self, key: str, cart: Cart) -> None:
        """Store ``cart`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the entry for ``key``. Missing keys are ignored."""
