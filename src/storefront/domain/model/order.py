"""Order aggregate.

An order is an immutable snapshot of a cart at the moment of purchase.
After creation only ``status`` and ``updated_at`` ever change, and only
along the transition table below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import InvalidStatusTransitionError, ValidationError
from storefront.domain.model.cart import CartLineItem
from storefront.domain.model.identity import Identity
from storefront.domain.model.product import ProductType
from storefront.domain.model.value_objects import Money, Quantity

PAYMENT_METHOD_COD = "COD"


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class ShippingInfo:
    full_name: str
    email: str
    phone: str
    address: str
    city: str
    zip: str
    country: str
    state: str = ""

    REQUIRED = ("full_name", "email", "phone", "address", "city", "zip", "country")

    @staticmethod
    def create(**fields: str) -> ShippingInfo:
        """Build shipping info, rejecting blank required fields."""
        cleaned = {key: (value or "").strip() for key, value in fields.items()}
        missing = [name for name in ShippingInfo.REQUIRED if not cleaned.get(name)]
        if missing:
            raise ValidationError(
                "Missing shipping information: " + ", ".join(missing)
            )
        return ShippingInfo(**cleaned)


@dataclass(frozen=True)
class OrderLineItem:
    """Deep copy of a cart line at commit time."""

    product_id: str
    name: str
    unit_price: Money
    original_price: Money
    image: str
    quantity: Quantity
    product_type: ProductType

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def is_physical(self) -> bool:
        return self.product_type is ProductType.PHYSICAL

    @staticmethod
    def from_cart_line(line: CartLineItem) -> OrderLineItem:
        return OrderLineItem(
            product_id=line.product_id,
            name=line.name,
            unit_price=line.unit_price,
            original_price=line.original_price,
            image=line.image,
            quantity=line.quantity,
            product_type=line.product_type,
        )


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.create()`` factory for new orders. The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    orders without re-validating.

    ``id`` is the storage-assigned document id (None until saved);
    ``order_id`` is the system-generated token shown to the shopper.
    """

    id: str | None
    order_id: str
    user_id: str
    user_email: str
    user_name: str
    items: tuple[OrderLineItem, ...]
    subtotal: Money
    shipping: Money
    tax: Money
    total_amount: Money
    shipping_info: ShippingInfo
    status: OrderStatus = OrderStatus.PENDING
    payment_method: str = PAYMENT_METHOD_COD
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: str,
        customer: Identity,
        lines: list[CartLineItem],
        shipping_info: ShippingInfo,
        shipping: Money,
        tax: Money,
    ) -> Order:
        if not lines:
            raise ValidationError("Order must contain at least one item")

        items = tuple(OrderLineItem.from_cart_line(line) for line in lines)
        subtotal = Money.zero(items[0].unit_price.currency)
        for item in items:
            subtotal = subtotal + item.line_total

        now = datetime.now(timezone.utc)
        return Order(
            id=None,
            order_id=order_id,
            user_id=customer.id,
            user_email=customer.email,
            user_name=customer.name,
            items=items,
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total_amount=subtotal + shipping + tax,
            shipping_info=shipping_info,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move to ``new_status`` if the transition table allows it."""
        if self.is_terminal:
            raise InvalidStatusTransitionError(
                f"Order {self.order_id} is already {self.status.value} and can no longer change"
            )
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(
                f"Cannot change order {self.order_id} from "
                f"{self.status.value} to {new_status.value}"
            )
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)

    # --- Computed properties --------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    @property
    def short_reference(self) -> str:
        return self.order_id[:8].upper()
