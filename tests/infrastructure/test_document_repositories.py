"""Tests for the document-store repositories.

Each test runs against a real JsonDocumentStore in a temporary directory.
"""

from datetime import timedelta

import pytest

from storefront.application.cart_manager import CartManager
from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from storefront.domain.model.cart import Cart, CartLineItem
from storefront.domain.model.identity import Identity
from storefront.domain.model.order import Order, OrderStatus, ShippingInfo
from storefront.domain.model.product import Product, ProductType
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.document_cart_repository import (
    CARTS,
    DocumentCartRepository,
)
from storefront.infrastructure.persistence.document_order_repository import (
    ORDERS,
    DocumentOrderRepository,
)
from storefront.infrastructure.persistence.document_product_repository import (
    PRODUCTS,
    DocumentProductRepository,
)
from storefront.infrastructure.persistence.document_store import JsonDocumentStore
from storefront.infrastructure.persistence.key_value_cart_store import KeyValueCartStore
from storefront.infrastructure.persistence.key_value_store import JsonKeyValueStore
from tests.fakes import FakeSessionProvider

LAMP = Product(id="lamp", name="Lamp", price=Money.of("80.00"), discount=25, stock=3,
               images=["https://img.example.test/lamp.jpg"], category="home")
EBOOK = Product(id="ebook", name="Ebook", price=Money.of("9.99"),
                product_type=ProductType.DIGITAL)


@pytest.fixture
def store(tmp_path):
    return JsonDocumentStore(tmp_path)


def _cart(owner_id=None) -> Cart:
    cart = Cart.empty(owner_id)
    cart.add(CartLineItem.snapshot(LAMP, 2))
    cart.add(CartLineItem.snapshot(EBOOK, 1))
    return cart


class TestDocumentProductRepository:

    def test_round_trip(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        loaded = repo.get_by_id("lamp")
        assert loaded == LAMP
        assert loaded.final_price == Money.of("60.00")

    def test_stored_final_price_is_not_trusted(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        store.update(PRODUCTS, "lamp", lambda doc: {**doc, "finalPrice": "1.00"})
        assert repo.get_by_id("lamp").final_price == Money.of("60.00")

    def test_list_all_sorted_by_name(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        repo.save(EBOOK)
        assert [p.name for p in repo.list_all()] == ["Ebook", "Lamp"]

    def test_decrement_is_conditional(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        assert repo.decrement_stock("lamp", 2) is True
        assert repo.decrement_stock("lamp", 2) is False
        assert repo.get_by_id("lamp").stock == 1
        assert repo.decrement_stock("missing", 1) is False

    def test_restore(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        repo.decrement_stock("lamp", 3)
        repo.restore_stock("lamp", 3)
        assert repo.get_by_id("lamp").stock == 3
        with pytest.raises(EntityNotFoundError):
            repo.restore_stock("missing", 1)


class TestDocumentCartRepository:

    def test_round_trip_bumps_version(self, store):
        repo = DocumentCartRepository(store)
        cart = _cart("u1")
        repo.save(cart)
        assert cart.version == 1

        loaded = repo.get("u1")
        assert loaded.version == 1
        assert loaded.total == Money.of("129.99")
        assert [i.product_id for i in loaded.items] == ["lamp", "ebook"]
        assert store.get(CARTS, "u1")["userId"] == "u1"

    def test_stale_write_rejected(self, store):
        repo = DocumentCartRepository(store)
        repo.save(_cart("u1"))

        first = repo.get("u1")
        second = repo.get("u1")
        first.remove("ebook")
        repo.save(first)

        second.clear()
        with pytest.raises(ConcurrencyConflictError):
            repo.save(second)
        assert repo.get("u1").line_count == 1

    def test_guest_cart_not_stored(self, store):
        with pytest.raises(ValidationError):
            DocumentCartRepository(store).save(_cart(None))

    def test_malformed_document_reported(self, store):
        store.put(CARTS, "u1", {"items": [{"productId": "x"}]})
        with pytest.raises(StoreUnavailableError, match="malformed"):
            DocumentCartRepository(store).get("u1")


class TestKeyValueCartStore:

    def test_round_trip_and_delete(self, tmp_path):
        carts = KeyValueCartStore(JsonKeyValueStore(tmp_path / "local.json"))
        carts.save("cart_guest", _cart())
        loaded = carts.get("cart_guest")
        assert loaded.quantity_of("lamp") == 2
        assert loaded.find("lamp").unit_price == Money.of("60.00")
        carts.delete("cart_guest")
        assert carts.get("cart_guest") is None


class TestDocumentOrderRepository:

    def _order(self, order_id: str, user: Identity) -> Order:
        return Order.create(
            order_id=order_id,
            customer=user,
            lines=_cart(user.id).items,
            shipping_info=ShippingInfo.create(
                full_name="Fay", email="fay@example.com", phone="555",
                address="3 Elm", city="Ogdenville", state="OR", zip="97000", country="US",
            ),
            shipping=Money.zero(),
            tax=Money.zero(),
        )

    def test_add_assigns_document_id(self, store):
        repo = DocumentOrderRepository(store)
        order = self._order("abc123", Identity("u1", "fay@example.com"))
        repo.add(order)

        assert order.id is not None and order.id != "abc123"
        loaded = repo.get_by_order_id("abc123")
        assert loaded == order

    def test_lookup_by_order_id(self, store):
        repo = DocumentOrderRepository(store)
        order = self._order("abc123", Identity("u1"))
        repo.add(order)
        assert repo.get_by_order_id("abc123").id == order.id
        assert repo.get_by_order_id("zzz") is None

    def test_listing_newest_first(self, store):
        repo = DocumentOrderRepository(store)
        older = self._order("old", Identity("u1"))
        older.created_at -= timedelta(days=1)
        repo.add(older)
        repo.add(self._order("new", Identity("u1")))
        repo.add(self._order("theirs", Identity("u2")))

        assert [o.order_id for o in repo.list_for_user("u1")] == ["new", "old"]
        assert len(repo.list_all()) == 3

    def test_save_status_only_touches_status(self, store):
        repo = DocumentOrderRepository(store)
        order = self._order("abc123", Identity("u1"))
        repo.add(order)
        before = store.get(ORDERS, order.id)

        order.transition_to(OrderStatus.PROCESSING)
        repo.save_status(order)

        after = store.get(ORDERS, order.id)
        assert after["status"] == "Processing"
        changed = {k for k in after if after[k] != before[k]}
        assert changed == {"status", "updatedAt"}

    def test_save_status_of_unstored_order(self, store):
        order = self._order("abc123", Identity("u1"))
        with pytest.raises(EntityNotFoundError):
            DocumentOrderRepository(store).save_status(order)


class TestCorruptCartEntries:

    @pytest.mark.parametrize(
        "raw",
        ["garbage", ["a", "list"], 42, {"items": "nope", "updatedAt": "2024-01-01T00:00:00"},
         {"items": ["not-a-line"], "updatedAt": "2024-01-01T00:00:00"}],
    )
    def test_reported_as_store_failure(self, tmp_path, raw):
        kv = JsonKeyValueStore(tmp_path / "local.json")
        kv.set("cart_guest", raw)
        with pytest.raises(StoreUnavailableError, match="malformed"):
            KeyValueCartStore(kv).get("cart_guest")

    def test_cart_manager_falls_back_to_empty_cart(self, tmp_path):
        kv = JsonKeyValueStore(tmp_path / "local.json")
        kv.set("cart_guest", "garbage")
        store = JsonDocumentStore(tmp_path / "documents")
        store.put(CARTS, "u1", {"items": 7})
        manager = CartManager(
            session=FakeSessionProvider(),
            local_store=KeyValueCartStore(kv),
            remote_repo=DocumentCartRepository(store),
            product_repo=DocumentProductRepository(store),
        )

        assert manager.get_cart(None).is_empty
        assert manager.get_cart(Identity("u1")).is_empty


class TestProductCatalogQueries:

    def test_filters_by_type_and_category(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        repo.save(EBOOK)
        repo.save(Product(id="rug", name="Rug", price=Money.of("40.00"), category="home"))

        assert [p.id for p in repo.list_all(product_type=ProductType.DIGITAL)] == ["ebook"]
        assert [p.id for p in repo.list_all(category="home")] == ["lamp", "rug"]
        assert repo.list_all(product_type=ProductType.DIGITAL, category="home") == []

    def test_delete(self, store):
        repo = DocumentProductRepository(store)
        repo.save(LAMP)
        repo.delete("lamp")
        repo.delete("lamp")
        assert repo.get_by_id("lamp") is None
