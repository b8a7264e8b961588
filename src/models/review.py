# src/models/review.py

"""Patron review model and visibility rules."""

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Literal

ReviewStatus = Literal["pending", "approved"]

PENDING: ReviewStatus = "pending"
APPROVED: ReviewStatus = "approved"


@dataclass
class Review:
    """A single patron review attached to a product."""

    id: str
    name: str
    rating: int
    text: str
    date: str
    status: ReviewStatus = PENDING

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict for storage or the remote catalog."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Review":
        """Build a review from a stored dict, tolerating unknown statuses.

        Raises ``ValueError`` when *data* is not an object or the rating
        is not a number.
        """
        if not isinstance(data, Mapping):
            raise ValueError(
                f"review is a {type(data).__name__}, not an object"
            )
        try:
            rating = int(data.get("rating", 0))
        except TypeError as exc:
            raise ValueError(f"bad review rating: {exc}") from exc
        status: ReviewStatus = (
            APPROVED if data.get("status") == APPROVED else PENDING
        )
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            rating=rating,
            text=str(data.get("text", "")),
            date=str(data.get("date", "")),
            status=status,
        )

    def is_visible_to(self, is_admin: bool) -> bool:
        """Approved reviews are public; admins also see pending ones."""
        return is_admin or self.status == APPROVED


def visible_reviews(
    reviews: Iterable[Review], is_admin: bool,
) -> list[Review]:
    """Return the reviews a viewer with the given privilege may see."""
    return [r for r in reviews if r.is_visible_to(is_admin)]


def format_review_date(day: date) -> str:
    """Format a date the way reviews display it, e.g. ``Oct 6, 2026``."""
    return f"{day:%b} {day.day}, {day.year}"
