"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order and assign its document ``id``."""

    @abstractmethod
    def get_by_order_id(self, order_id: str) -> Order | None:
        """Return an order by its system-generated order id, or None."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def save_status(self, order: Order) -> None:
        """Persist ``status`` and ``updated_at`` of an existing order.

        No other field of a stored order is ever rewritten.
        """
