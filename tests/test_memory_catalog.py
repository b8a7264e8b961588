# tests/test_memory_catalog.py

"""Tests for the in-process remote catalog."""

import unittest

from src.models.product import Product
from src.remote.base_catalog import RemoteCatalogError, parse_products
from src.remote.memory_catalog import MemoryRemoteCatalog


def _make_product(pid: str, name: str) -> Product:
    return Product(id=pid, name=name, price=10.0, category="Test")


class TestMemoryRemoteCatalog(unittest.TestCase):
    """Reads, writes and snapshot pushes."""

    def setUp(self) -> None:
        self.remote = MemoryRemoteCatalog(
            [_make_product("b", "Beta"), _make_product("a", "Alpha")]
        )
        self.snapshots: list[list[Product]] = []
        self.errors: list[RemoteCatalogError] = []

    def _subscribe(self) -> None:
        self.sub = self.remote.subscribe(
            self.snapshots.append, self.errors.append,
        )

    def test_fetch_is_sorted_by_name(self) -> None:
        names = [p.name for p in self.remote.fetch_products()]
        self.assertEqual(names, ["Alpha", "Beta"])

    def test_subscribe_delivers_current_snapshot(self) -> None:
        self._subscribe()
        self.assertEqual(len(self.snapshots), 1)
        self.assertEqual(len(self.snapshots[0]), 2)

    def test_create_pushes_snapshot_with_new_id(self) -> None:
        self._subscribe()
        new_id = self.remote.create_product({"name": "Gamma", "price": 5})
        self.assertTrue(new_id.startswith("doc-"))
        self.assertEqual(len(self.snapshots), 2)
        self.assertIn(new_id, [str(p.id) for p in self.snapshots[-1]])

    def test_update_is_partial(self) -> None:
        self.remote.update_product("a", {"price": 99})
        alpha = [p for p in self.remote.fetch_products() if p.id == "a"][0]
        self.assertEqual(alpha.price, 99.0)
        self.assertEqual(alpha.name, "Alpha")

    def test_update_missing_is_404(self) -> None:
        with self.assertRaises(RemoteCatalogError) as cm:
            self.remote.update_product("zzz", {"price": 1})
        self.assertEqual(cm.exception.status, 404)

    def test_invalid_documents_rejected(self) -> None:
        """Nothing that would break later snapshots is stored."""
        with self.assertRaises(RemoteCatalogError) as cm:
            self.remote.update_product("a", {"price": "abc"})
        self.assertEqual(cm.exception.status, 400)
        with self.assertRaises(RemoteCatalogError):
            self.remote.create_product({"name": "X", "price": -3})
        with self.assertRaises(RemoteCatalogError):
            self.remote.batch_create([{"name": "X", "tags": 4}])
        self.assertEqual(len(self.remote.fetch_products()), 2)

    def test_delete(self) -> None:
        self.remote.delete_product("a")
        self.assertEqual(
            [p.id for p in self.remote.fetch_products()], ["b"]
        )

    def test_batch_create(self) -> None:
        count = self.remote.batch_create(
            [{"name": "X", "price": 1}, {"name": "Y", "price": 2}]
        )
        self.assertEqual(count, 2)
        self.assertEqual(len(self.remote.fetch_products()), 4)

    def test_read_only_rejects_writes(self) -> None:
        remote = MemoryRemoteCatalog(read_only=True)
        with self.assertRaises(RemoteCatalogError) as cm:
            remote.create_product({"name": "X", "price": 1})
        self.assertEqual(cm.exception.status, 403)
        with self.assertRaises(RemoteCatalogError):
            remote.delete_product("x")

    def test_cancelled_subscription_stops_pushes(self) -> None:
        self._subscribe()
        self.sub.cancel()
        self.sub.cancel()
        self.assertFalse(self.sub.active)
        self.remote.delete_product("a")
        self.assertEqual(len(self.snapshots), 1)


class TestParseProducts(unittest.TestCase):
    """parse_products payload validation."""

    def test_valid_list(self) -> None:
        products = parse_products([{"id": "x", "name": "X", "price": 1}])
        self.assertEqual(products[0].id, "x")

    def test_rejects_non_list(self) -> None:
        with self.assertRaises(RemoteCatalogError):
            parse_products({"id": "x"})

    def test_rejects_bad_entry(self) -> None:
        with self.assertRaises(RemoteCatalogError):
            parse_products([{"name": "no id", "price": 1}])


if __name__ == "__main__":
    unittest.main()
