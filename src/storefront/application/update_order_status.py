"""Application service: Update Order Status use case (admin).

Only ``status`` and ``updated_at`` are rewritten; the Order aggregate
rejects moves the transition table does not allow.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, new_status: str) -> None:
        try:
            status = OrderStatus(new_status)
        except ValueError as exc:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status '{new_status}' (expected one of {allowed})"
            ) from exc

        order = self._order_repo.get_by_order_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        previous = order.status
        order.transition_to(status)
        self._order_repo.save_status(order)
        logger.info(
            "Order %s status %s -> %s", order_id, previous.value, status.value
        )
