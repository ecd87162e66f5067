"""Document-store implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.product import Product, ProductType
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.document_store import Document, DocumentStore

PRODUCTS = "products"


class DocumentProductRepository(ProductRepository):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        raw = self._store.get(PRODUCTS, product_id)
        return self._to_domain(product_id, raw) if raw is not None else None

    def list_all(
        self,
        product_type: ProductType | None = None,
        category: str | None = None,
    ) -> list[Product]:
        filters: dict[str, str] = {}
        if product_type is not None:
            filters["productType"] = product_type.value
        if category:
            filters["category"] = category
        return [
            self._to_domain(doc_id, raw)
            for doc_id, raw in self._store.query(PRODUCTS, filters=filters, order_by="name")
        ]

    def save(self, product: Product) -> None:
        self._store.put(PRODUCTS, product.id, self._to_raw(product))

    def delete(self, product_id: str) -> None:
        self._store.delete(PRODUCTS, product_id)

    def next_id(self) -> str:
        return self._store.new_id()

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        def apply(current: Document | None) -> Document | None:
            if current is None or current.get("stock", 0) < quantity:
                return None
            current["stock"] -= quantity
            return current

        return self._store.update(PRODUCTS, product_id, apply) is not None

    def restore_stock(self, product_id: str, quantity: int) -> None:
        def apply(current: Document | None) -> Document | None:
            if current is None:
                return None
            current["stock"] = current.get("stock", 0) + quantity
            return current

        if self._store.update(PRODUCTS, product_id, apply) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "discount": product.discount,
            "finalPrice": str(product.final_price.amount),
            "stock": product.stock,
            "productType": product.product_type.value,
            "images": list(product.images),
            "description": product.description,
            "category": product.category,
        }

    @staticmethod
    def _to_domain(product_id: str, raw: dict) -> Product:
        # finalPrice is derived; the stored copy is never read back.
        return Product(
            id=product_id,
            name=raw["name"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            discount=raw.get("discount", 0),
            stock=raw.get("stock", 0),
            product_type=ProductType(raw.get("productType", "physical")),
            images=list(raw.get("images", [])),
            description=raw.get("description", ""),
            category=raw.get("category", ""),
        )
