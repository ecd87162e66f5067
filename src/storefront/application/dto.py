"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.service.checkout_pricing import CheckoutQuote


@dataclass(frozen=True)
class ShippingInfoSpec:
    """Input: the checkout form as typed by the shopper."""

    full_name: str
    email: str
    phone: str
    address: str
    city: str
    zip: str
    country: str
    state: str = ""


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single cart or order line as displayed to the user."""

    product_id: str
    name: str
    product_type: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    owner_id: str | None
    items: list[LineItemDTO]
    subtotal: str
    shipping: str  # "FREE" or formatted fee
    estimated_total: str
    updated_at: str

    @property
    def line_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_id: str
    reference: str
    customer_email: str
    status: str
    items: list[LineItemDTO]
    subtotal: str
    shipping: str
    total: str
    payment_method: str
    ship_to: list[str]
    created_at: str


def _line_dto(item) -> LineItemDTO:
    return LineItemDTO(
        product_id=item.product_id,
        name=item.name,
        product_type=item.product_type.value,
        quantity=item.quantity.value,
        unit_price=str(item.unit_price),
        line_total=str(item.line_total),
    )


def cart_to_dto(cart: Cart, quote: CheckoutQuote) -> CartDTO:
    return CartDTO(
        owner_id=cart.owner_id,
        items=[_line_dto(item) for item in cart.items],
        subtotal=str(quote.subtotal),
        shipping="FREE" if quote.shipping.is_zero else str(quote.shipping),
        estimated_total=str(quote.total),
        updated_at=cart.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def order_to_dto(order: Order) -> OrderDTO:
    info = order.shipping_info
    city_line = f"{info.city}, {info.state} {info.zip}" if info.state else f"{info.city} {info.zip}"
    return OrderDTO(
        order_id=order.order_id,
        reference=order.short_reference,
        customer_email=order.user_email,
        status=order.status.value,
        items=[_line_dto(item) for item in order.items],
        subtotal=str(order.subtotal),
        shipping="FREE" if order.shipping.is_zero else str(order.shipping),
        total=str(order.total_amount),
        payment_method=order.payment_method,
        ship_to=[info.full_name, info.address, city_line, info.country, info.phone],
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
