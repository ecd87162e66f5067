"""Tests for the JSON-file document store and key-value store."""

import multiprocessing

import pytest

from storefront.domain.exceptions import StoreUnavailableError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.document_product_repository import (
    DocumentProductRepository,
)
from storefront.infrastructure.persistence.document_store import JsonDocumentStore
from storefront.infrastructure.persistence.key_value_store import JsonKeyValueStore


@pytest.fixture
def store(tmp_path):
    return JsonDocumentStore(tmp_path / "documents")


class TestJsonDocumentStore:

    def test_missing_document_is_none(self, store):
        assert store.get("products", "nope") is None

    def test_put_then_get_returns_copy(self, store):
        store.put("products", "a", {"name": "Widget", "tags": ["x"]})
        doc = store.get("products", "a")
        doc["tags"].append("y")
        assert store.get("products", "a") == {"name": "Widget", "tags": ["x"]}

    def test_survives_new_instance(self, tmp_path):
        JsonDocumentStore(tmp_path).put("orders", "o1", {"orderId": "abc"})
        assert JsonDocumentStore(tmp_path).get("orders", "o1") == {"orderId": "abc"}

    def test_query_filters_orders_and_limits(self, store):
        store.put("orders", "1", {"userId": "u1", "createdAt": "2024-01-01"})
        store.put("orders", "2", {"userId": "u2", "createdAt": "2024-01-02"})
        store.put("orders", "3", {"userId": "u1", "createdAt": "2024-01-03"})

        ids = [doc_id for doc_id, _ in store.query(
            "orders", filters={"userId": "u1"}, order_by="createdAt", descending=True
        )]
        assert ids == ["3", "1"]

        limited = store.query("orders", order_by="createdAt", limit=1)
        assert [doc_id for doc_id, _ in limited] == ["1"]

    def test_delete_is_idempotent(self, store):
        store.put("carts", "u1", {"items": []})
        store.delete("carts", "u1")
        store.delete("carts", "u1")
        assert store.get("carts", "u1") is None

    def test_update_writes_mutator_result(self, store):
        store.put("products", "a", {"stock": 3})
        written = store.update("products", "a", lambda doc: {**doc, "stock": doc["stock"] - 1})
        assert written == {"stock": 2}
        assert store.get("products", "a") == {"stock": 2}

    def test_update_returning_none_writes_nothing(self, store):
        store.put("products", "a", {"stock": 3})
        assert store.update("products", "a", lambda doc: None) is None
        assert store.get("products", "a") == {"stock": 3}

    def test_update_sees_missing_document_as_none(self, store):
        seen = []
        store.update("carts", "u9", lambda doc: seen.append(doc))
        assert seen == [None]

    def test_new_ids_are_unique(self, store):
        assert len({store.new_id() for _ in range(50)}) == 50

    def test_corrupt_collection_reported(self, tmp_path):
        (tmp_path / "products.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreUnavailableError, match="products"):
            JsonDocumentStore(tmp_path).get("products", "a")


class TestJsonKeyValueStore:

    def test_set_get_delete(self, tmp_path):
        kv = JsonKeyValueStore(tmp_path / "local.json")
        assert kv.get("k", "default") == "default"
        kv.set("k", {"v": 1})
        assert JsonKeyValueStore(tmp_path / "local.json").get("k") == {"v": 1}
        kv.delete("k")
        assert kv.get("k") is None

    def test_writes_replace_the_file_whole(self, tmp_path):
        kv = JsonKeyValueStore(tmp_path / "local.json")
        for i in range(5):
            kv.set(f"k{i}", i)
        assert kv.get("k4") == 4
        assert not [p for p in tmp_path.iterdir() if p.name.endswith(".tmp")]

    def test_corrupt_file_reported(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text("[[[", encoding="utf-8")
        with pytest.raises(StoreUnavailableError):
            JsonKeyValueStore(path).get("k")


class TestMalformedFiles:

    def test_collection_that_is_not_an_object(self, tmp_path):
        (tmp_path / "carts.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StoreUnavailableError, match="expected a JSON object"):
            JsonDocumentStore(tmp_path).get("carts", "u1")

    def test_document_that_is_not_an_object(self, tmp_path):
        (tmp_path / "carts.json").write_text('{"u1": "oops"}', encoding="utf-8")
        with pytest.raises(StoreUnavailableError, match="malformed"):
            JsonDocumentStore(tmp_path).query("carts")

    def test_local_storage_that_is_not_an_object(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text('"just a string"', encoding="utf-8")
        with pytest.raises(StoreUnavailableError, match="expected a JSON object"):
            JsonKeyValueStore(path).get("cart_guest")


def _decrement_worker(root, attempts, results):
    repo = DocumentProductRepository(JsonDocumentStore(root))
    results.put(sum(repo.decrement_stock("p1", 1) for _ in range(attempts)))


@pytest.mark.skipif(
    "fork" not in multiprocessing.get_all_start_methods(), reason="needs fork start method"
)
class TestCrossProcessWrites:

    def test_concurrent_decrements_lose_no_updates(self, tmp_path):
        DocumentProductRepository(JsonDocumentStore(tmp_path)).save(
            Product(id="p1", name="Widget", price=Money.of("1.00"), stock=150)
        )
        ctx = multiprocessing.get_context("fork")
        results = ctx.Queue()
        workers = [
            ctx.Process(target=_decrement_worker, args=(tmp_path, 50, results))
            for _ in range(4)
        ]
        for worker in workers:
            worker.start()
        succeeded = sum(results.get(timeout=60) for _ in workers)
        for worker in workers:
            worker.join(timeout=60)

        assert all(worker.exitcode == 0 for worker in workers)
        assert succeeded == 150
        assert DocumentProductRepository(JsonDocumentStore(tmp_path)).get_by_id("p1").stock == 0
