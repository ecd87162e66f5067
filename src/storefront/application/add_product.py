"""Application service: Add Product use case (admin)."""

from __future__ import annotations

import logging
from pathlib import Path

from storefront.application.ports import ObjectStore
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product, ProductType
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        object_store: ObjectStore | None = None,
        currency: str = "USD",
    ) -> None:
        self._product_repo = product_repo
        self._object_store = object_store
        self._currency = currency

    def handle(
        self,
        name: str,
        price: str,
        discount: int = 0,
        stock: int = 0,
        product_type: str = ProductType.PHYSICAL.value,
        image_path: Path | None = None,
        description: str = "",
        category: str = "",
    ) -> Product:
        """Add a new product to the catalog.

        An image file, when given, is uploaded to the object store and its
        public URL becomes the product's first image.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        try:
            kind = ProductType(product_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown product type '{product_type}'") from exc

        product = Product(
            id=self._product_repo.next_id(),
            name=name.strip(),
            price=Money.of(price, self._currency),
            discount=discount,
            stock=stock if kind is ProductType.PHYSICAL else 0,
            product_type=kind,
            description=description,
            category=category,
        )
        if product.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        if image_path is not None:
            product.images.append(self._upload_image(product.id, image_path))

        self._product_repo.save(product)
        logger.info("Product %s '%s' added", product.id, product.name)
        return product

    def _upload_image(self, product_id: str, image_path: Path) -> str:
        if self._object_store is None:
            raise ValidationError("No object store configured for product images")
        try:
            data = image_path.read_bytes()
        except OSError as exc:
            raise ValidationError(f"Cannot read image '{image_path}': {exc}") from exc
        stored = self._object_store.put(f"products/{product_id}/{image_path.name}", data)
        return self._object_store.public_url(stored)
