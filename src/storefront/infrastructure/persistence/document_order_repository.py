"""Document-store implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus, ShippingInfo
from storefront.domain.model.product import ProductType
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.document_store import Document, DocumentStore

ORDERS = "orders"


class DocumentOrderRepository(OrderRepository):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        doc_id = self._store.new_id()
        self._store.put(ORDERS, doc_id, self._to_raw(order))
        order.id = doc_id

    def get_by_order_id(self, order_id: str) -> Order | None:
        matches = self._store.query(ORDERS, filters={"orderId": order_id}, limit=1)
        if not matches:
            return None
        doc_id, raw = matches[0]
        return self._to_domain(doc_id, raw)

    def list_for_user(self, user_id: str) -> list[Order]:
        return [
            self._to_domain(doc_id, raw)
            for doc_id, raw in self._store.query(
                ORDERS, filters={"userId": user_id}, order_by="createdAt", descending=True
            )
        ]

    def list_all(self) -> list[Order]:
        return [
            self._to_domain(doc_id, raw)
            for doc_id, raw in self._store.query(
                ORDERS, order_by="createdAt", descending=True
            )
        ]

    def save_status(self, order: Order) -> None:
        def apply(current: Document | None) -> Document | None:
            if current is None:
                return None
            current["status"] = order.status.value
            current["updatedAt"] = order.updated_at.isoformat()
            return current

        if order.id is None or self._store.update(ORDERS, order.id, apply) is None:
            raise EntityNotFoundError(f"Order {order.order_id} not found")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        info = order.shipping_info
        return {
            "orderId": order.order_id,
            "userId": order.user_id,
            "userEmail": order.user_email,
            "userName": order.user_name,
            "currency": order.total_amount.currency,
            "items": [
                {
                    "productId": item.product_id,
                    "name": item.name,
                    "unitPrice": str(item.unit_price.amount),
                    "originalPrice": str(item.original_price.amount),
                    "imageRef": item.image,
                    "quantity": item.quantity.value,
                    "productType": item.product_type.value,
                }
                for item in order.items
            ],
            "subtotal": str(order.subtotal.amount),
            "shipping": str(order.shipping.amount),
            "tax": str(order.tax.amount),
            "totalAmount": str(order.total_amount.amount),
            "paymentMethod": order.payment_method,
            "status": order.status.value,
            "shippingInfo": {
                "fullName": info.full_name,
                "email": info.email,
                "phone": info.phone,
                "address": info.address,
                "city": info.city,
                "state": info.state,
                "zip": info.zip,
                "country": info.country,
            },
            "createdAt": order.created_at.isoformat(),
            "updatedAt": order.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(doc_id: str, raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        items = tuple(
            OrderLineItem(
                product_id=i["productId"],
                name=i["name"],
                unit_price=money(i["unitPrice"]),
                original_price=money(i.get("originalPrice", i["unitPrice"])),
                image=i.get("imageRef", ""),
                quantity=Quantity(i["quantity"]),
                product_type=ProductType(i.get("productType", "physical")),
            )
            for i in raw["items"]
        )
        info = raw["shippingInfo"]
        return Order(
            id=doc_id,
            order_id=raw["orderId"],
            user_id=raw["userId"],
            user_email=raw.get("userEmail", ""),
            user_name=raw.get("userName", ""),
            items=items,
            subtotal=money(raw["subtotal"]),
            shipping=money(raw["shipping"]),
            tax=money(raw.get("tax", "0.00")),
            total_amount=money(raw["totalAmount"]),
            shipping_info=ShippingInfo(
                full_name=info["fullName"],
                email=info.get("email", ""),
                phone=info.get("phone", ""),
                address=info["address"],
                city=info["city"],
                zip=info.get("zip", ""),
                country=info.get("country", ""),
                state=info.get("state", ""),
            ),
            status=OrderStatus(raw["status"]),
            payment_method=raw.get("paymentMethod", "COD"),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
        )
