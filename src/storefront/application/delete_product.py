"""Application service: Delete Product use case (admin).

Stored images are removed first, on a best-effort basis: an image that
cannot be deleted is logged and left behind, and the product document
is deleted regardless.
"""

from __future__ import annotations

import logging

from storefront.application.ports import ObjectStore
from storefront.domain.exceptions import DomainException, EntityNotFoundError
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, product_repo: ProductRepository, object_store: ObjectStore) -> None:
        self._product_repo = product_repo
        self._object_store = object_store

    def handle(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        for url in product.images:
            path = self._object_store.path_for_url(url)
            if path is None:
                continue
            try:
                self._object_store.delete(path)
            except DomainException as exc:
                logger.warning("Could not delete image %s of product %s: %s", path, product_id, exc)

        self._product_repo.delete(product_id)
        logger.info("Product %s '%s' deleted", product_id, product.name)
        return product
