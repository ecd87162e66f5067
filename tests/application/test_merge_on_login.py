"""Integration tests for merging a guest cart at sign-in."""

import pytest

from storefront.application.cart_manager import CartManager
from storefront.domain.exceptions import StoreUnavailableError
from storefront.domain.model.identity import Identity
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from tests.fakes import (
    FakeCartRepository,
    FakeLocalCartStore,
    FakeProductRepository,
    FakeSessionProvider,
)

BOB = Identity(id="u2", email="bob@example.com", name="Bob")


def _setup() -> tuple[CartManager, FakeSessionProvider, FakeLocalCartStore, FakeCartRepository]:
    session = FakeSessionProvider()
    local = FakeLocalCartStore()
    remote = FakeCartRepository()
    products = FakeProductRepository([
        Product(id="A", name="Widget", price=Money.of("10.00"), stock=10),
        Product(id="B", name="Gadget", price=Money.of("4.00"), stock=10),
        Product(id="C", name="Doohickey", price=Money.of("1.00"), stock=10),
    ])
    manager = CartManager(session, local, remote, products)
    session.on_identity_acquired(manager.merge_on_login)
    return manager, session, local, remote


def _quantities(cart) -> dict[str, int]:
    return {item.product_id: item.quantity.value for item in cart.items}


def _seed_identity_cart(manager, session, items: dict[str, int]) -> None:
    session.sign_in(BOB)
    for product_id, qty in items.items():
        manager.add_item(product_id, qty)
    session.sign_out()


class TestMergeOnLogin:

    def test_sums_and_appends(self):
        manager, session, _, _ = _setup()
        _seed_identity_cart(manager, session, {"A": 1, "B": 3})
        manager.add_item("A", 2)  # as guest

        session.sign_in(BOB)

        cart = manager.get_cart(BOB)
        assert _quantities(cart) == {"A": 3, "B": 3}
        assert cart.total == Money.of("42.00")

    def test_guest_only_lines_appended(self):
        manager, session, _, _ = _setup()
        _seed_identity_cart(manager, session, {"A": 1})
        manager.add_item("C", 4)

        session.sign_in(BOB)

        assert _quantities(manager.get_cart(BOB)) == {"A": 1, "C": 4}

    def test_empty_guest_leaves_identity_cart_unchanged(self):
        manager, session, _, remote = _setup()
        _seed_identity_cart(manager, session, {"A": 1, "B": 3})
        version_before = remote.get("u2").version

        session.sign_in(BOB)

        assert _quantities(manager.get_cart(BOB)) == {"A": 1, "B": 3}
        assert remote.get("u2").version == version_before

    def test_no_identity_cart_yet(self):
        manager, session, _, remote = _setup()
        manager.add_item("A", 2)

        session.sign_in(BOB)

        assert _quantities(remote.get("u2")) == {"A": 2}

    def test_guest_cart_deleted_after_success(self):
        manager, session, local, _ = _setup()
        manager.add_item("A", 2)

        session.sign_in(BOB)

        assert "cart_guest" not in local.keys()
        assert _quantities(local.get("cart_u2")) == {"A": 2}

    def test_guest_cart_kept_when_merge_write_fails(self):
        manager, session, local, remote = _setup()
        manager.add_item("A", 2)
        remote.fail_writes = True

        with pytest.raises(StoreUnavailableError):
            session.sign_in(BOB)

        assert _quantities(local.get("cart_guest")) == {"A": 2}
        assert session.current_identity() is None

        # Signing in again retries the merge once the store is back.
        remote.fail_writes = False
        session.sign_in(BOB)
        assert session.current_identity() == BOB
        assert "cart_guest" not in local.keys()
        assert _quantities(remote.get("u2")) == {"A": 2}

    def test_runs_once_per_sign_in(self):
        manager, session, _, remote = _setup()
        manager.add_item("A", 2)

        session.sign_in(BOB)
        session.sign_in(BOB)  # already signed in: no second merge

        assert _quantities(remote.get("u2")) == {"A": 2}
