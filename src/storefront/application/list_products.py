"""Application service: catalogue browsing queries."""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product, ProductType
from storefront.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_type: str | None = None,
        category: str | None = None,
        search: str = "",
    ) -> list[Product]:
        """Products ordered by name.

        Type and category narrow the store query; ``search`` is then
        matched case-insensitively against name, description and category.
        """
        kind = None
        if product_type:
            try:
                kind = ProductType(product_type)
            except ValueError as exc:
                raise ValidationError(f"Unknown product type '{product_type}'") from exc

        products = self._product_repo.list_all(product_type=kind, category=category or None)

        needle = search.strip().lower()
        if not needle:
            return products
        return [
            p for p in products
            if needle in p.name.lower()
            or needle in p.description.lower()
            or needle in p.category.lower()
        ]


class ListCategoriesHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self) -> list[str]:
        """Distinct product categories, alphabetically."""
        return sorted({p.category for p in self._product_repo.list_all() if p.category})
