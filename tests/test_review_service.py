# tests/test_review_service.py

"""Tests for review submission and moderation."""

import asyncio
import tempfile
import unittest
from datetime import date
from pathlib import Path

from src.models.identity import guest, local_admin, signed_in
from src.models.product import Product
from src.models.review import APPROVED, PENDING
from src.remote.memory_catalog import MemoryRemoteCatalog
from src.services.review_service import ReviewService
from src.services.store import Store
from src.storage.local_storage import LocalStorage

TODAY = date(2026, 10, 6)


class TestReviewService(unittest.IsolatedAsyncioTestCase):
    """Reviews flow through the store to the remote catalog."""

    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.mkdtemp()
        self.storage = LocalStorage(db_path=Path(self._tmp) / "test.db")
        self.remote = MemoryRemoteCatalog(
            [Product(id="p1", name="Ruq'ah Note", price=90)]
        )
        self.store = Store(
            self.remote,
            self.storage,
            identity=signed_in("u1", "hana@example.com", admin_user=""),
        )
        await self.store.open()
        self.service = ReviewService(self.store)

    async def asyncTearDown(self) -> None:
        self.store.close()
        self.storage.close()

    def _reviews(self) -> list[object]:
        product = self.store.get_product("p1")
        assert product is not None
        return list(product.reviews)

    async def test_user_review_is_pending(self) -> None:
        outcome = await self.service.submit_review(
            "p1", 5, "  Wonderful  ", today=TODAY,
        )
        await asyncio.sleep(0)
        self.assertEqual(outcome, "remote")
        product = self.store.get_product("p1")
        assert product is not None
        review = product.reviews[-1]
        self.assertEqual(review.status, PENDING)
        self.assertEqual(review.text, "Wonderful")
        self.assertEqual(review.name, "hana")
        self.assertEqual(review.date, "Oct 6, 2026")

    async def test_pending_review_hidden_from_guest(self) -> None:
        await self.service.submit_review("p1", 4, "Nice", today=TODAY)
        await asyncio.sleep(0)
        self.store.set_identity(guest())
        product = self.store.get_product("p1")
        assert product is not None
        self.assertEqual(self.store.visible_reviews(product), [])

    async def test_admin_review_is_approved(self) -> None:
        self.store.set_identity(local_admin())
        await self.service.submit_review("p1", 5, "Approved", today=TODAY)
        await asyncio.sleep(0)
        product = self.store.get_product("p1")
        assert product is not None
        self.assertEqual(product.reviews[-1].status, APPROVED)

    async def test_guest_cannot_review(self) -> None:
        self.store.set_identity(guest())
        with self.assertRaises(PermissionError):
            await self.service.submit_review("p1", 5, "Hi")

    async def test_validation(self) -> None:
        with self.assertRaises(ValueError):
            await self.service.submit_review("p1", 5, "   ")
        with self.assertRaises(ValueError):
            await self.service.submit_review("p1", 6, "Too good")
        with self.assertRaises(ValueError):
            await self.service.submit_review("nope", 3, "Unknown")

    async def test_admin_approves_and_deletes(self) -> None:
        await self.service.submit_review("p1", 3, "Fine", today=TODAY)
        await asyncio.sleep(0)
        product = self.store.get_product("p1")
        assert product is not None
        review_id = product.reviews[-1].id

        self.store.set_identity(local_admin())
        await self.service.set_review_status("p1", review_id, APPROVED)
        await asyncio.sleep(0)
        product = self.store.get_product("p1")
        assert product is not None
        self.assertEqual(product.reviews[-1].status, APPROVED)

        await self.service.delete_review("p1", review_id)
        await asyncio.sleep(0)
        self.assertEqual(self._reviews(), [])

    async def test_moderation_requires_admin(self) -> None:
        with self.assertRaises(PermissionError):
            await self.service.set_review_status("p1", "r", APPROVED)
        with self.assertRaises(PermissionError):
            await self.service.delete_review("p1", "r")


if __name__ == "__main__":
    unittest.main()
