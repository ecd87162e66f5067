"""Product aggregate.

Products live independently of carts and orders. They have their own
lifecycle: prices and discounts change, stock is adjusted at checkout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

PLACEHOLDER_IMAGE = "/assets/images/placeholder.jpg"


class ProductType(Enum):
    PHYSICAL = "physical"
    DIGITAL = "digital"


@dataclass
class Product:
    """A product in the catalog.

    ``final_price`` is derived from ``price`` and ``discount`` on every
    access, so it always agrees with the formula
    ``price - price * discount / 100``.
    """

    id: str
    name: str
    price: Money
    discount: int = 0
    stock: int = 0
    product_type: ProductType = ProductType.PHYSICAL
    images: list[str] = field(default_factory=list)
    description: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        self._check_discount(self.discount)
        if self.stock < 0:
            raise ValidationError("Product stock cannot be negative")

    @property
    def final_price(self) -> Money:
        if self.discount == 0:
            return self.price
        return self.price.percent_off(self.discount)

    @property
    def is_physical(self) -> bool:
        return self.product_type is ProductType.PHYSICAL

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else PLACEHOLDER_IMAGE

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Carts and orders are unaffected: they hold a price snapshot.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def update_discount(self, percent: int) -> None:
        self._check_discount(percent)
        self.discount = percent

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Product stock cannot be negative")
        self.stock = quantity

    @staticmethod
    def _check_discount(percent: int) -> None:
        if not 0 <= percent <= 100:
            raise ValidationError(
                f"Discount must be between 0 and 100 percent, got {percent}"
            )
