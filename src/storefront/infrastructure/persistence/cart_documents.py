"""Cart <-> document mapping shared by the local and remote cart stores.

The stored ``total`` is written for readers of the raw documents but is
ignored on load: the domain always recomputes it from the lines.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from storefront.domain.exceptions import DomainException, StoreUnavailableError
from storefront.domain.model.cart import Cart, CartLineItem
from storefront.domain.model.product import ProductType
from storefront.domain.model.value_objects import Money, Quantity


def cart_to_document(cart: Cart) -> dict:
    return {
        "ownerId": cart.owner_id,
        "version": cart.version,
        "currency": cart.currency,
        "updatedAt": cart.updated_at.isoformat(),
        "total": str(cart.total.amount),
        "items": [
            {
                "productId": item.product_id,
                "name": item.name,
                "unitPrice": str(item.unit_price.amount),
                "originalPrice": str(item.original_price.amount),
                "imageRef": item.image,
                "quantity": item.quantity.value,
                "productType": item.product_type.value,
                "maxStock": item.max_stock,
            }
            for item in cart.items
        ],
    }


def cart_from_document(raw: dict) -> Cart:
    if not isinstance(raw, dict) or not isinstance(raw.get("items", []), list):
        raise StoreUnavailableError(f"Stored cart is malformed: {raw!r:.80}")
    try:
        currency = raw.get("currency", "USD")
        items = [_line_from_document(i, currency) for i in raw.get("items", [])]
        return Cart(
            items=items,
            owner_id=raw.get("ownerId"),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
            version=raw.get("version", 0),
            currency=currency,
        )
    except (KeyError, TypeError, ValueError, ArithmeticError, DomainException) as exc:
        raise StoreUnavailableError(f"Stored cart is malformed: {exc}") from exc


def _line_from_document(raw: dict, currency: str) -> CartLineItem:
    if not isinstance(raw, dict):
        raise TypeError(f"cart line is not an object: {raw!r:.80}")
    return CartLineItem(
        product_id=raw["productId"],
        name=raw["name"],
        unit_price=Money(Decimal(raw["unitPrice"]), currency),
        original_price=Money(Decimal(raw.get("originalPrice", raw["unitPrice"])), currency),
        image=raw.get("imageRef", ""),
        quantity=Quantity(raw["quantity"]),
        product_type=ProductType(raw.get("productType", "physical")),
        max_stock=raw.get("maxStock"),
    )
