"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure
layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product, ProductType


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(
        self,
        product_type: ProductType | None = None,
        category: str | None = None,
    ) -> list[Product]:
        """Return catalog products ordered by name, optionally filtered."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product. Missing products are ignored."""

    @abstractmethod
    def next_id(self) -> str:
        """Generate an identifier for a new product."""

    @abstractmethod
    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Atomically apply ``stock -= quantity`` when ``stock >= quantity``.

        Returns False, leaving stock untouched, when the product is
        missing or holds fewer than ``quantity`` units.
        """

    @abstractmethod
    def restore_stock(self, product_id: str, quantity: int) -> None:
        """Atomically add ``quantity`` units back to a product's stock."""
