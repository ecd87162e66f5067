"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from storefront.application.cart_manager import CartManager
from storefront.application.dto import CartDTO, cart_to_dto
from storefront.domain.service.checkout_pricing import CheckoutPricing


class ShowCartHandler:

    def __init__(
        self, cart_manager: CartManager, pricing: CheckoutPricing | None = None
    ) -> None:
        self._cart_manager = cart_manager
        self._pricing = pricing or CheckoutPricing()

    def handle(self) -> CartDTO:
        cart = self._cart_manager.current_cart()
        return cart_to_dto(cart, self._pricing.quote(cart.total))
