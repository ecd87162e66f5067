"""Application service: Cart Manager.

Owns every cart mutation. Each operation is a read-modify-write of the
whole cart snapshot followed by a save to the remote store (signed-in
shoppers only) and to the local store, then an observer notification.

Remote writes carry the cart's base version, so two sessions editing the
same identity's cart cannot silently overwrite each other: the loser gets
a ConcurrencyConflictError and can reload.
"""

from __future__ import annotations

import logging

from storefront.application.ports import CartObserver, NullCartObserver, SessionProvider
from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
)
from storefront.domain.model.cart import GUEST_CART_KEY, Cart, CartLineItem, cart_key
from storefront.domain.model.identity import Identity
from storefront.domain.repository.cart_repository import CartRepository, LocalCartStore
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CartManager:

    def __init__(
        self,
        session: SessionProvider,
        local_store: LocalCartStore,
        remote_repo: CartRepository,
        product_repo: ProductRepository,
        observer: CartObserver | None = None,
        currency: str = "USD",
    ) -> None:
        self._session = session
        self._local = local_store
        self._remote = remote_repo
        self._product_repo = product_repo
        self._observer = observer or NullCartObserver()
        self._currency = currency

    # --- Queries --------------------------------------------------------------

    def get_cart(self, identity: Identity | None = None) -> Cart:
        """Load the cart for ``identity`` (guest when None).

        Never raises: any read failure degrades to the next source and
        finally to an empty cart.
        """
        owner_id = identity.id if identity else None

        if owner_id:
            try:
                cart = self._remote.get(owner_id)
            except DomainException as exc:
                logger.warning("Remote cart read failed for %s: %s", owner_id, exc)
                cart = None
            if cart is not None:
                return cart

        try:
            cart = self._local.get(cart_key(owner_id))
        except DomainException as exc:
            logger.warning("Local cart read failed for %s: %s", cart_key(owner_id), exc)
            cart = None

        if cart is None:
            return Cart.empty(owner_id, self._currency)
        cart.owner_id = owner_id
        return cart

    def current_cart(self) -> Cart:
        return self.get_cart(self._session.current_identity())

    # --- Commands -------------------------------------------------------------

    def add_item(self, product_id: str, quantity: int = 1) -> Cart:
        """Add ``quantity`` units of a product to the current cart.

        A product already in the cart keeps the price it was first added
        at; only its quantity grows.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")

        line = CartLineItem.snapshot(product, quantity)
        identity = self._session.current_identity()
        cart = self.get_cart(identity)

        if product.is_physical:
            requested = cart.quantity_of(product.id) + quantity
            if requested > product.stock:
                raise InsufficientStockError(product.name, requested, product.stock)

        cart.add(line)
        self._persist(cart, identity)
        logger.debug("Added %d x %s to %s", quantity, product_id, cart_key(cart.owner_id))
        return cart

    def update_quantity(self, product_id: str, new_quantity: int) -> Cart:
        """Set a line's quantity; zero or less removes the line."""
        if new_quantity <= 0:
            return self.remove_item(product_id)

        identity = self._session.current_identity()
        cart = self.get_cart(identity)
        if cart.find(product_id) is None:
            return cart

        cart.set_quantity(product_id, new_quantity)
        self._persist(cart, identity)
        return cart

    def remove_item(self, product_id: str) -> Cart:
        identity = self._session.current_identity()
        cart = self.get_cart(identity)
        if cart.find(product_id) is None:
            return cart

        cart.remove(product_id)
        self._persist(cart, identity)
        return cart

    def clear_cart(self, identity: Identity | None = None) -> Cart:
        cart = self.get_cart(identity)
        cart.clear()
        self._persist(cart, identity)
        return cart

    def merge_on_login(self, identity: Identity) -> Cart:
        """Fold the guest cart into ``identity``'s cart.

        The guest cart is deleted only after the merged cart has been
        stored; if storing fails it is kept so the merge can be retried.
        """
        guest = self._local.get(GUEST_CART_KEY)
        target = self._remote.get(identity.id) or Cart.empty(identity.id, self._currency)

        if guest is None or guest.is_empty:
            self._local.save(cart_key(identity.id), target)
            if guest is not None:
                self._local.delete(GUEST_CART_KEY)
            self._observer.cart_changed(target)
            return target

        target.merge_from(guest)
        try:
            self._persist(target, identity)
        except DomainException:
            logger.warning(
                "Cart merge for %s failed; guest cart kept for retry", identity.id
            )
            raise

        self._local.delete(GUEST_CART_KEY)
        logger.info(
            "Merged %d guest line(s) into cart of %s", guest.line_count, identity.id
        )
        return target

    # --- Internal helpers -----------------------------------------------------

    def _persist(self, cart: Cart, identity: Identity | None) -> None:
        owner_id = identity.id if identity else None
        cart.owner_id = owner_id
        if owner_id:
            self._remote.save(cart)
        self._local.save(cart_key(owner_id), cart)
        self._observer.cart_changed(cart)
