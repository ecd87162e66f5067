"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from storefront.application.add_product import AddProductHandler
from storefront.application.cart_manager import CartManager
from storefront.application.delete_product import DeleteProductHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.ports import CartObserver
from storefront.domain.model.value_objects import Money
from storefront.domain.service.checkout_pricing import CheckoutPricing, ShippingPolicy
from storefront.domain.service.inventory_guard import InventoryGuard
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.persistence.document_cart_repository import (
    DocumentCartRepository,
)
from storefront.infrastructure.persistence.document_order_repository import (
    DocumentOrderRepository,
)
from storefront.infrastructure.persistence.document_product_repository import (
    DocumentProductRepository,
)
from storefront.infrastructure.persistence.document_store import JsonDocumentStore
from storefront.infrastructure.persistence.key_value_cart_store import KeyValueCartStore
from storefront.infrastructure.persistence.key_value_store import JsonKeyValueStore
from storefront.infrastructure.session.local_session_provider import LocalSessionProvider
from storefront.infrastructure.storage.local_object_store import LocalObjectStore


@lru_cache
def _json_document_store(root: Path) -> JsonDocumentStore:
    # One instance per directory so every repository shares its lock.
    return JsonDocumentStore(root)


def document_store() -> JsonDocumentStore:
    return _json_document_store(get_settings().data_dir / "documents")


def key_value_store() -> JsonKeyValueStore:
    return JsonKeyValueStore(get_settings().data_dir / "local_storage.json")


def object_store() -> LocalObjectStore:
    settings = get_settings()
    return LocalObjectStore(settings.data_dir / "objects", settings.public_base_url)


def product_repository() -> DocumentProductRepository:
    return DocumentProductRepository(document_store())


def order_repository() -> DocumentOrderRepository:
    return DocumentOrderRepository(document_store())


def session_provider() -> LocalSessionProvider:
    return LocalSessionProvider(key_value_store())


def checkout_pricing() -> CheckoutPricing:
    settings = get_settings()
    return CheckoutPricing(
        ShippingPolicy(
            free_threshold=Money(settings.free_shipping_threshold, settings.currency),
            flat_fee=Money(settings.flat_shipping_fee, settings.currency),
        )
    )


def cart_manager(
    session: LocalSessionProvider | None = None,
    observer: CartObserver | None = None,
) -> CartManager:
    """Build a CartManager and subscribe it to sign-in transitions."""
    session = session or session_provider()
    manager = CartManager(
        session=session,
        local_store=KeyValueCartStore(key_value_store()),
        remote_repo=DocumentCartRepository(document_store()),
        product_repo=product_repository(),
        observer=observer,
        currency=get_settings().currency,
    )
    session.on_identity_acquired(manager.merge_on_login)
    return manager


def place_order_handler(observer: CartObserver | None = None) -> PlaceOrderHandler:
    session = session_provider()
    return PlaceOrderHandler(
        session=session,
        cart_manager=cart_manager(session, observer),
        order_repo=order_repository(),
        inventory_guard=InventoryGuard(product_repository()),
        pricing=checkout_pricing(),
    )


def add_product_handler() -> AddProductHandler:
    return AddProductHandler(
        product_repository(), object_store(), currency=get_settings().currency
    )


def delete_product_handler() -> DeleteProductHandler:
    return DeleteProductHandler(product_repository(), object_store())
