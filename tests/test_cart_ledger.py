# tests/test_cart_ledger.py

"""Tests for the persistent cart ledger."""

import json
import sqlite3
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from src.models.product import Product
from src.storage.cart_ledger import (
    CartLedger,
    deserialize_cart,
    serialize_cart,
)
from src.storage.local_storage import LocalStorage

KEY = "modernist_cart"


def _make_product(pid: int | str, price: float) -> Product:
    """Create a minimal Product with the given id and price."""
    return Product(id=pid, name=f"Work {pid}", price=price)


class _LedgerTestCase(unittest.TestCase):
    """Temp storage plus a fresh ledger for each test."""

    def setUp(self) -> None:
        self._tmp = tempfile.mkdtemp()
        self.db_path = Path(self._tmp) / "test.db"
        self.storage = LocalStorage(db_path=self.db_path)
        self.ledger = CartLedger(self.storage)

    def tearDown(self) -> None:
        self.storage.close()


class TestCartCommands(_LedgerTestCase):
    """Adding, removing and changing quantities."""

    def test_repeated_adds_accumulate_one_line(self) -> None:
        product = _make_product(1, 100)
        for _ in range(4):
            self.ledger.add_to_cart(product)
        items = self.ledger.items
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].quantity, 4)

    def test_ids_compare_by_string(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 100))
        self.ledger.add_to_cart(_make_product("1", 100))
        self.assertEqual(len(self.ledger.items), 1)

    def test_add_opens_cart(self) -> None:
        self.assertFalse(self.ledger.is_open)
        self.ledger.add_to_cart(_make_product(1, 100))
        self.assertTrue(self.ledger.is_open)

    def test_toggle_cart(self) -> None:
        self.ledger.toggle_cart()
        self.assertTrue(self.ledger.is_open)
        self.ledger.toggle_cart()
        self.assertFalse(self.ledger.is_open)

    def test_insertion_order_kept(self) -> None:
        for pid in (3, 1, 2):
            self.ledger.add_to_cart(_make_product(pid, 10))
        self.ledger.add_to_cart(_make_product(3, 10))
        self.assertEqual(
            [i.product.id for i in self.ledger.items], [3, 1, 2]
        )

    def test_update_quantity_sets_value(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 10))
        self.ledger.update_quantity(1, 5)
        self.assertEqual(self.ledger.items[0].quantity, 5)

    def test_non_positive_quantity_removes_line(self) -> None:
        """update_quantity(q <= 0) behaves like remove_from_cart."""
        for quantity in (0, -3):
            with self.subTest(quantity=quantity):
                self.ledger.add_to_cart(_make_product(1, 10))
                self.ledger.update_quantity(1, quantity)
                self.assertEqual(self.ledger.items, [])

    def test_update_unknown_id_is_noop(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 10))
        self.ledger.update_quantity(99, 3)
        self.assertEqual(self.ledger.items[0].quantity, 1)

    def test_remove_unknown_id_is_noop(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 10))
        self.ledger.remove_from_cart(99)
        self.assertEqual(len(self.ledger.items), 1)

    def test_clear_cart(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 10))
        self.ledger.clear_cart()
        self.assertEqual(self.ledger.items, [])
        self.assertEqual(self.ledger.cart_total, 0.0)

    def test_items_are_copies(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 10))
        self.ledger.items[0].quantity = 50
        self.assertEqual(self.ledger.items[0].quantity, 1)

    def test_listener_called_on_change(self) -> None:
        calls: list[int] = []
        self.ledger.add_listener(lambda: calls.append(1))
        self.ledger.add_to_cart(_make_product(1, 10))
        self.ledger.toggle_cart()
        self.assertEqual(len(calls), 2)


class TestCartTotals(_LedgerTestCase):
    """Subtotal, total and unit count."""

    def test_worked_example(self) -> None:
        """A x2 @ 100 plus B x1 @ 50 is 250; dropping B leaves 200."""
        a = _make_product("A", 100)
        b = _make_product("B", 50)
        self.ledger.add_to_cart(a)
        self.ledger.add_to_cart(a)
        self.ledger.add_to_cart(b)
        self.assertEqual(self.ledger.cart_total, 250)
        self.ledger.remove_from_cart("B")
        self.assertEqual(self.ledger.cart_total, 200)

    def test_total_equals_subtotal(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 12.5))
        self.ledger.update_quantity(1, 3)
        self.assertEqual(self.ledger.cart_total, self.ledger.cart_subtotal)
        self.assertEqual(self.ledger.cart_total, 37.5)

    def test_item_count_sums_quantities(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 1))
        self.ledger.add_to_cart(_make_product(1, 1))
        self.ledger.add_to_cart(_make_product(2, 1))
        self.assertEqual(self.ledger.item_count, 3)

    def test_empty_cart_totals_zero(self) -> None:
        self.assertEqual(self.ledger.cart_total, 0.0)
        self.assertEqual(self.ledger.item_count, 0)


class TestCartPersistence(_LedgerTestCase):
    """Rehydration and durable writes."""

    def test_reopened_ledger_sees_same_cart(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 100))
        self.ledger.add_to_cart(_make_product(1, 100))
        self.ledger.add_to_cart(_make_product("e1", 450))

        reopened = CartLedger(self.storage)
        self.assertEqual(
            [(i.product.id, i.quantity) for i in reopened.items],
            [(1, 2), ("e1", 1)],
        )
        self.assertEqual(reopened.cart_total, 650)

    def test_cart_closed_after_rehydrate(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 100))
        self.assertFalse(CartLedger(self.storage).is_open)

    def test_cleared_cart_persists_empty(self) -> None:
        self.ledger.add_to_cart(_make_product(1, 100))
        self.ledger.clear_cart()
        self.assertEqual(CartLedger(self.storage).items, [])
        self.assertEqual(self.storage.get_item(KEY), "[]")

    def test_custom_storage_key(self) -> None:
        other = CartLedger(self.storage, storage_key="guest_cart")
        other.add_to_cart(_make_product(1, 100))
        self.assertIsNone(self.storage.get_item(KEY))
        self.assertIsNotNone(self.storage.get_item("guest_cart"))

    def test_corrupt_record_starts_empty(self) -> None:
        for raw in (
            "not json",
            '{"product": 1}',
            '[{"quantity": 1}]',
            '[{"product": {"id": 1, "name": "x", "price": 1}, "quantity": 0}]',
            '[{"product": "x", "quantity": 1}]',
            '[{"product": {"id": 1, "name": "x", "price": 1, '
            '"reviews": [1]}, "quantity": 1}]',
            '[{"product": {"id": 1, "name": "x", "price": null}, '
            '"quantity": 1}]',
        ):
            with self.subTest(raw=raw):
                self.storage.set_item(KEY, raw)
                with self.assertLogs("umars_hands.cart", level="WARNING"):
                    ledger = CartLedger(self.storage)
                self.assertEqual(ledger.items, [])

    def test_unreadable_storage_starts_empty(self) -> None:
        """A failing read at construction gives an empty cart."""
        self.ledger.add_to_cart(_make_product(1, 100))
        with patch.object(
            self.storage, "get_item", side_effect=sqlite3.DatabaseError,
        ):
            with self.assertLogs("umars_hands.cart", level="WARNING"):
                ledger = CartLedger(self.storage)
        self.assertEqual(ledger.items, [])

    def test_storage_failure_keeps_cart_in_memory(self) -> None:
        with patch.object(
            self.storage, "set_item", side_effect=sqlite3.OperationalError,
        ):
            with self.assertLogs("umars_hands.cart", level="ERROR"):
                self.ledger.add_to_cart(_make_product(1, 100))
        self.assertEqual(len(self.ledger.items), 1)


class TestCartCodec(unittest.TestCase):
    """serialize_cart / deserialize_cart validation."""

    def test_empty_cart_serializes_to_empty_list(self) -> None:
        ledger_json = serialize_cart([])
        self.assertEqual(json.loads(ledger_json), [])

    def test_duplicate_ids_rejected(self) -> None:
        entry = {"product": {"id": 1, "name": "x", "price": 1}, "quantity": 1}
        with self.assertRaises(ValueError):
            deserialize_cart(json.dumps([entry, entry]))

    def test_boolean_quantity_rejected(self) -> None:
        entry = {
            "product": {"id": 1, "name": "x", "price": 1},
            "quantity": True,
        }
        with self.assertRaises(ValueError):
            deserialize_cart(json.dumps([entry]))


if __name__ == "__main__":
    unittest.main()
