"""Application service: order history queries."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.application.ports import SessionProvider
from storefront.domain.exceptions import UnauthenticatedError
from storefront.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository, session: SessionProvider) -> None:
        self._order_repo = order_repo
        self._session = session

    def handle(self, all_users: bool = False) -> list[OrderDTO]:
        """Return the shopper's orders, newest first.

        With ``all_users`` the whole order book is returned (admin view).
        """
        if all_users:
            orders = self._order_repo.list_all()
        else:
            identity = self._session.current_identity()
            if identity is None:
                raise UnauthenticatedError("Please sign in to view your orders")
            orders = self._order_repo.list_for_user(identity.id)
        return [order_to_dto(order) for order in orders]
