# tests/test_local_storage.py

"""Tests for the SQLite key/value store."""

import tempfile
import unittest
from pathlib import Path

from src.storage.local_storage import LocalStorage


class TestLocalStorage(unittest.TestCase):
    """LocalStorage get/set/remove behaviour."""

    def setUp(self) -> None:
        """Create a temporary database for each test."""
        self._tmp = tempfile.mkdtemp()
        self.db_path = Path(self._tmp) / "test.db"
        self.storage = LocalStorage(db_path=self.db_path)

    def tearDown(self) -> None:
        """Close the database connection."""
        self.storage.close()

    def test_missing_key_is_none(self) -> None:
        self.assertIsNone(self.storage.get_item("absent"))

    def test_set_then_get(self) -> None:
        self.storage.set_item("k", "v")
        self.assertEqual(self.storage.get_item("k"), "v")

    def test_set_replaces_whole_value(self) -> None:
        self.storage.set_item("k", "first")
        self.storage.set_item("k", "second")
        self.assertEqual(self.storage.get_item("k"), "second")

    def test_remove(self) -> None:
        self.storage.set_item("k", "v")
        self.assertTrue(self.storage.remove_item("k"))
        self.assertFalse(self.storage.remove_item("k"))
        self.assertIsNone(self.storage.get_item("k"))

    def test_values_survive_reopen(self) -> None:
        """A second connection sees what the first wrote."""
        self.storage.set_item("k", "durable")
        self.storage.close()
        self.storage = LocalStorage(db_path=self.db_path)
        self.assertEqual(self.storage.get_item("k"), "durable")

    def test_creates_parent_directory(self) -> None:
        nested = Path(self._tmp) / "a" / "b" / "store.db"
        other = LocalStorage(db_path=nested)
        other.close()
        self.assertTrue(nested.exists())


if __name__ == "__main__":
    unittest.main()
