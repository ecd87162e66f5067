"""Cart aggregate.

A cart is an ordered list of line items, at most one per product. Each
line carries a price snapshot taken when the product was first added;
later price changes on the product never reach an existing line.

Invariants:
- a line's quantity is always >= 1 (a line that would drop to zero is
  removed instead)
- ``total`` is derived from the lines and never stored as truth
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storefront.domain.exceptions import InsufficientStockError
from storefront.domain.model.product import Product, ProductType
from storefront.domain.model.value_objects import Money, Quantity

GUEST_CART_KEY = "cart_guest"


def cart_key(owner_id: str | None) -> str:
    """Local storage key for a cart scope."""
    return f"cart_{owner_id}" if owner_id else GUEST_CART_KEY


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CartLineItem:
    product_id: str
    name: str
    unit_price: Money  # snapshot of the effective price at add-time
    original_price: Money
    image: str
    quantity: Quantity
    product_type: ProductType
    max_stock: int | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def is_physical(self) -> bool:
        return self.product_type is ProductType.PHYSICAL

    @staticmethod
    def snapshot(product: Product, quantity: int) -> CartLineItem:
        """Capture a product's display data and effective price."""
        return CartLineItem(
            product_id=product.id,
            name=product.name,
            unit_price=product.final_price,
            original_price=product.price,
            image=product.primary_image,
            quantity=Quantity(quantity),
            product_type=product.product_type,
            max_stock=product.stock if product.is_physical else None,
        )


@dataclass
class Cart:
    """Aggregate root for a shopping cart.

    ``owner_id`` is None for a guest cart. ``version`` is the optimistic
    concurrency token of the last stored copy this cart was loaded from.
    """

    items: list[CartLineItem] = field(default_factory=list)
    owner_id: str | None = None
    updated_at: datetime = field(default_factory=_now)
    version: int = 0
    currency: str = "USD"

    @staticmethod
    def empty(owner_id: str | None = None, currency: str = "USD") -> Cart:
        return Cart(items=[], owner_id=owner_id, currency=currency)

    # --- Mutations ------------------------------------------------------------

    def add(self, line: CartLineItem) -> None:
        """Add a line, summing onto an existing line for the same product.

        The existing line keeps its original price snapshot.
        """
        existing = self.find(line.product_id)
        if existing is None:
            self.items.append(line)
        else:
            self._replace(existing, replace(existing, quantity=existing.quantity + line.quantity))
        self.touch()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Replace a line's quantity; zero or less removes the line.

        Absent lines are ignored.
        """
        existing = self.find(product_id)
        if existing is None:
            return
        if quantity <= 0:
            self.remove(product_id)
            return
        if (
            existing.is_physical
            and existing.max_stock
            and quantity > existing.max_stock
        ):
            raise InsufficientStockError(existing.name, quantity, existing.max_stock)
        self._replace(existing, replace(existing, quantity=Quantity(quantity)))
        self.touch()

    def remove(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]
        self.touch()

    def clear(self) -> None:
        self.items = []
        self.touch()

    def merge_from(self, other: Cart) -> None:
        """Fold another cart's lines into this one.

        Lines for products already present have their quantities summed;
        the rest are appended in the other cart's order.
        """
        for line in other.items:
            existing = self.find(line.product_id)
            if existing is None:
                self.items.append(line)
            else:
                self._replace(
                    existing, replace(existing, quantity=existing.quantity + line.quantity)
                )
        self.touch()

    def touch(self) -> None:
        self.updated_at = _now()

    # --- Queries --------------------------------------------------------------

    def find(self, product_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def quantity_of(self, product_id: str) -> int:
        line = self.find(product_id)
        return line.quantity.value if line else 0

    @property
    def total(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def line_count(self) -> int:
        return len(self.items)

    # --- Internal helpers -----------------------------------------------------

    def _replace(self, old: CartLineItem, new: CartLineItem) -> None:
        self.items[self.items.index(old)] = new
