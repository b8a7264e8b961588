# src/services/review_service.py

"""Submitting and moderating patron reviews."""

import logging
import time
from datetime import date

from src.models.product import Product, ProductId
from src.models.review import (
    APPROVED,
    PENDING,
    Review,
    ReviewStatus,
    format_review_date,
)
from src.services.mutation_gateway import MutationOutcome
from src.services.store import Store

logger = logging.getLogger("umars_hands.reviews")


class ReviewService:
    """Review workflows on top of the store facade.

    Reviews from ordinary users wait for moderation; reviews written by
    an administrator are published immediately.
    """

    def __init__(self, store: Store) -> None:
        self.store = store

    async def submit_review(
        self,
        product_id: ProductId,
        rating: int,
        text: str,
        today: date | None = None,
    ) -> MutationOutcome:
        identity = self.store.identity
        if not identity.is_signed_in:
            raise PermissionError("please sign in to leave a review")
        body = text.strip()
        if not body:
            raise ValueError("review text is empty")
        if not 1 <= rating <= 5:
            raise ValueError(f"rating must be 1-5, got {rating}")
        product = self._product(product_id)

        review = Review(
            id=f"review-{time.time_ns() // 1_000_000}",
            name=(
                identity.display_name
                or identity.email
                or "Anonymous Patron"
            ),
            rating=rating,
            text=body,
            date=format_review_date(today or date.today()),
            status=APPROVED if identity.is_admin else PENDING,
        )
        logger.info(
            "Review %s submitted for %s (%s)",
            review.id,
            product_id,
            review.status,
        )
        return await self.store.update_reviews(
            product_id, [*product.reviews, review],
        )

    async def set_review_status(
        self,
        product_id: ProductId,
        review_id: str,
        status: ReviewStatus,
    ) -> MutationOutcome:
        """Approve a review or send it back to moderation. Admin only."""
        self._require_admin()
        product = self._product(product_id)
        reviews = [
            Review(
                id=r.id,
                name=r.name,
                rating=r.rating,
                text=r.text,
                date=r.date,
                status=status if r.id == review_id else r.status,
            )
            for r in product.reviews
        ]
        return await self.store.update_reviews(product_id, reviews)

    async def delete_review(
        self, product_id: ProductId, review_id: str,
    ) -> MutationOutcome:
        """Remove a review. Admin only."""
        self._require_admin()
        product = self._product(product_id)
        reviews = [r for r in product.reviews if r.id != review_id]
        return await self.store.update_reviews(product_id, reviews)

    def _product(self, product_id: ProductId) -> Product:
        product = self.store.get_product(product_id)
        if product is None:
            raise ValueError(f"unknown product {product_id}")
        return product

    def _require_admin(self) -> None:
        if not self.store.identity.is_admin:
            raise PermissionError("only administrators moderate reviews")
