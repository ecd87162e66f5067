"""Application service: Update Product use case (admin)."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        new_price: str | None = None,
        discount: int | None = None,
        stock: int | None = None,
    ) -> Product:
        """Update a product's price, discount or stock.

        This does NOT affect any existing carts or orders — they captured
        a price snapshot when the item was added.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        if new_price is not None:
            product.update_price(Money.of(new_price, product.price.currency))
        if discount is not None:
            product.update_discount(discount)
        if stock is not None:
            product.set_stock(stock)

        self._product_repo.save(product)
        return product
