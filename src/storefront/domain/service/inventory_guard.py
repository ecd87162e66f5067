"""Domain service: Inventory Guard.

Stock is checked and applied only at order-commit time; there is no
reservation or hold. Two steps are exposed:

  ``validate_and_reserve`` reads the *live* stock of every physical line
  and fails before any mutation if one of them is short.

  ``commit_decrement`` applies a conditional decrement per line
  (``stock -= qty`` only while ``stock >= qty``). A concurrent checkout
  that drained a product between the two steps makes the conditional
  decrement fail; lines already decremented are restored so stock is
  never left partially applied or negative.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError
from storefront.domain.model.product import ProductType
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockLine(Protocol):
    """Anything carrying a product reference and a quantity.

    Cart lines and order lines both qualify.
    """

    product_id: str
    name: str
    quantity: Quantity
    product_type: ProductType


class InventoryGuard:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def validate_and_reserve(self, items: Iterable[StockLine]) -> None:
        """Fail with InsufficientStockError if any physical line is short."""
        for line in _physical(items):
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product '{line.name}' is no longer available")
            if product.stock < line.quantity.value:
                raise InsufficientStockError(line.name, line.quantity.value, product.stock)

    def commit_decrement(self, items: Iterable[StockLine]) -> None:
        """Decrement stock for every physical line, all or nothing."""
        applied: list[StockLine] = []
        for line in _physical(items):
            if self._product_repo.decrement_stock(line.product_id, line.quantity.value):
                applied.append(line)
                continue

            self.restore(applied)
            product = self._product_repo.get_by_id(line.product_id)
            available = product.stock if product is not None else 0
            raise InsufficientStockError(line.name, line.quantity.value, available)

        logger.debug("Decremented stock for %d line(s)", len(applied))

    def restore(self, items: Iterable[StockLine]) -> None:
        """Give back stock taken by ``commit_decrement``."""
        for line in _physical(items):
            self._product_repo.restore_stock(line.product_id, line.quantity.value)
            logger.info("Restored %d unit(s) of %s", line.quantity.value, line.product_id)


def _physical(items: Iterable[StockLine]) -> list[StockLine]:
    return [line for line in items if line.product_type is ProductType.PHYSICAL]
