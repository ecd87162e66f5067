"""Application service: Place Order use case.

Turns the signed-in shopper's cart into an immutable order.

Steps:
1. Require a signed-in identity and complete shipping information.
2. Load the cart; refuse an empty one.
3. Check live stock for every physical line (no side effects on failure).
4. Price the order: subtotal, flat shipping unless above the free
   threshold, tax via the pricing policy.
5. Decrement stock atomically per line, then persist the order. If the
   order cannot be stored the decrements are given back, so a stored
   order always has its stock adjustment and vice versa.
6. Clear the cart.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import asdict

from storefront.application.cart_manager import CartManager
from storefront.application.dto import ShippingInfoSpec
from storefront.application.ports import SessionProvider
from storefront.domain.exceptions import (
    DomainException,
    EmptyCartError,
    UnauthenticatedError,
)
from storefront.domain.model.order import Order, ShippingInfo
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.checkout_pricing import CheckoutPricing
from storefront.domain.service.inventory_guard import InventoryGuard

logger = logging.getLogger(__name__)


def new_order_id() -> str:
    return uuid.uuid4().hex


class PlaceOrderHandler:

    def __init__(
        self,
        session: SessionProvider,
        cart_manager: CartManager,
        order_repo: OrderRepository,
        inventory_guard: InventoryGuard,
        pricing: CheckoutPricing | None = None,
        id_factory: Callable[[], str] = new_order_id,
    ) -> None:
        self._session = session
        self._cart_manager = cart_manager
        self._order_repo = order_repo
        self._guard = inventory_guard
        self._pricing = pricing or CheckoutPricing()
        self._id_factory = id_factory

    def handle(self, shipping: ShippingInfoSpec) -> str:
        """Place an order for the current cart and return its order id."""
        identity = self._session.current_identity()
        if identity is None:
            raise UnauthenticatedError("Please sign in to place an order")

        shipping_info = ShippingInfo.create(**asdict(shipping))

        cart = self._cart_manager.get_cart(identity)
        if cart.is_empty:
            raise EmptyCartError("Your cart is empty")

        self._guard.validate_and_reserve(cart.items)

        quote = self._pricing.quote(cart.total)
        order = Order.create(
            order_id=self._id_factory(),
            customer=identity,
            lines=cart.items,
            shipping_info=shipping_info,
            shipping=quote.shipping,
            tax=quote.tax,
        )

        self._guard.commit_decrement(order.items)
        try:
            self._order_repo.add(order)
        except DomainException:
            logger.warning(
                "Storing order %s failed; restoring stock", order.order_id
            )
            self._guard.restore(order.items)
            raise

        logger.info(
            "Order %s placed by %s: %d line(s), total %s",
            order.order_id, identity.id, len(order.items), order.total_amount,
        )

        try:
            self._cart_manager.clear_cart(identity)
        except DomainException as exc:
            # The order is already stored and stays valid.
            logger.warning("Order %s placed but cart not cleared: %s", order.order_id, exc)

        return order.order_id
