"""Capabilities the application layer needs from the outside world.

Authentication, blob storage and presentation are external
collaborators; these interfaces are the minimal surface the use cases
call into.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from storefront.domain.model.cart import Cart
from storefront.domain.model.identity import Identity

IdentityCallback = Callable[[Identity], None]


class SessionProvider(ABC):

    @abstractmethod
    def current_identity(self) -> Identity | None:
        """Return the signed-in identity, or None for a guest."""

    @abstractmethod
    def on_identity_acquired(self, callback: IdentityCallback) -> None:
        """Register ``callback`` for the absent -> present transition."""


class ObjectStore(ABC):

    @abstractmethod
    def put(self, path: str, data: bytes) -> str:
        """Store ``data`` at ``path`` and return the stored path."""

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Return a URL from which ``path`` can be fetched."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the object at ``path``."""

    @abstractmethod
    def path_for_url(self, url: str) -> str | None:
        """Return the stored path behind one of our public URLs.

        None when ``url`` was not issued by this store.
        """


class CartObserver(ABC):
    """Notified after every persisted cart mutation."""

    @abstractmethod
    def cart_changed(self, cart: Cart) -> None:
        """React to the new cart state (badge counts, re-rendering)."""


class NullCartObserver(CartObserver):

    def cart_changed(self, cart: Cart) -> None:
        pass
