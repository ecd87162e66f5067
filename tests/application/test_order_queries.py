"""Integration tests for order history, lookup and admin status changes."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InvalidStatusTransitionError,
    UnauthenticatedError,
    ValidationError,
)
from storefront.domain.model.cart import CartLineItem
from storefront.domain.model.identity import Identity
from storefront.domain.model.order import Order, OrderStatus, ShippingInfo
from storefront.domain.model.product import ProductType
from storefront.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeOrderRepository, FakeSessionProvider

DAVE = Identity(id="u4", email="dave@example.com", name="Dave")
ERIN = Identity(id="u5", email="erin@example.com", name="Erin")


def _place(repo: FakeOrderRepository, order_id: str, customer: Identity, age_days: int = 0) -> Order:
    line = CartLineItem(
        product_id="A",
        name="Widget",
        unit_price=Money.of("12.50"),
        original_price=Money.of("12.50"),
        image="img.jpg",
        quantity=Quantity(2),
        product_type=ProductType.PHYSICAL,
    )
    order = Order.create(
        order_id=order_id,
        customer=customer,
        lines=[line],
        shipping_info=ShippingInfo.create(
            full_name=customer.name, email=customer.email, phone="1",
            address="2 Side St", city="Shelbyville", zip="54321", country="US",
        ),
        shipping=Money.of("5.99"),
        tax=Money.zero(),
    )
    order.created_at = datetime.now(timezone.utc) - timedelta(days=age_days)
    repo.add(order)
    return order


class TestShowOrder:

    def test_found_by_order_id(self):
        repo = FakeOrderRepository()
        _place(repo, "ff00aa11bb22", DAVE)
        dto = ShowOrderHandler(repo).handle("ff00aa11bb22")
        assert dto.reference == "FF00AA11"
        assert dto.total == "$30.99"
        assert dto.shipping == "$5.99"
        assert dto.status == "Pending"
        assert dto.ship_to[2] == "Shelbyville 54321"

    def test_document_id_is_not_an_order_id(self):
        repo = FakeOrderRepository()
        order = _place(repo, "ff00aa11bb22", DAVE)
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(repo).handle(order.id)


class TestListOrders:

    def test_only_own_orders_newest_first(self):
        repo = FakeOrderRepository()
        _place(repo, "old", DAVE, age_days=3)
        _place(repo, "new", DAVE, age_days=0)
        _place(repo, "other", ERIN, age_days=1)

        dtos = ListOrdersHandler(repo, FakeSessionProvider(DAVE)).handle()
        assert [d.order_id for d in dtos] == ["new", "old"]

    def test_all_users(self):
        repo = FakeOrderRepository()
        _place(repo, "old", DAVE, age_days=3)
        _place(repo, "other", ERIN, age_days=1)

        dtos = ListOrdersHandler(repo, FakeSessionProvider()).handle(all_users=True)
        assert [d.order_id for d in dtos] == ["other", "old"]

    def test_guest_rejected(self):
        with pytest.raises(UnauthenticatedError):
            ListOrdersHandler(FakeOrderRepository(), FakeSessionProvider()).handle()


class TestUpdateOrderStatus:

    def test_allowed_transition_persisted(self):
        repo = FakeOrderRepository()
        _place(repo, "o1", DAVE)
        handler = UpdateOrderStatusHandler(repo)

        handler.handle("o1", "Processing")
        handler.handle("o1", "Delivered")

        assert repo.get_by_order_id("o1").status == OrderStatus.DELIVERED

    def test_illegal_transition_rejected(self):
        repo = FakeOrderRepository()
        _place(repo, "o1", DAVE)
        with pytest.raises(InvalidStatusTransitionError):
            UpdateOrderStatusHandler(repo).handle("o1", "Delivered")
        assert repo.get_by_order_id("o1").status == OrderStatus.PENDING

    def test_cancelled_is_terminal(self):
        repo = FakeOrderRepository()
        _place(repo, "o1", DAVE)
        handler = UpdateOrderStatusHandler(repo)
        handler.handle("o1", "Cancelled")
        with pytest.raises(InvalidStatusTransitionError):
            handler.handle("o1", "Processing")

    def test_unknown_status_rejected(self):
        repo = FakeOrderRepository()
        _place(repo, "o1", DAVE)
        with pytest.raises(ValidationError, match="Unknown order status"):
            UpdateOrderStatusHandler(repo).handle("o1", "Shipped")

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            UpdateOrderStatusHandler(FakeOrderRepository()).handle("nope", "Processing")
