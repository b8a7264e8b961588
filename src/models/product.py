# src/models/product.py

"""Product data model shared by the catalog, cart and remote catalog."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.models.review import Review

ProductId = str | int

# Fields a caller may set on create/update; ``id`` is owned by the catalog.
PRODUCT_FIELDS: tuple[str, ...] = (
    "name",
    "category",
    "price",
    "description",
    "image_url",
    "images",
    "tags",
    "reviews",
)


def ids_match(left: ProductId, right: ProductId) -> bool:
    """Compare product ids by string form so ``1`` and ``"1"`` agree."""
    return str(left) == str(right)


def serialize_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a partial product mapping to JSON-safe values.

    Unknown keys are dropped; ``reviews`` may hold :class:`Review`
    objects or plain dicts.  A list field given a non-iterable value
    raises ``ValueError``.
    """
    result: dict[str, Any] = {}
    for key, value in fields.items():
        if key not in PRODUCT_FIELDS:
            continue
        if key in ("images", "tags", "reviews") and isinstance(
            value, (str, bytes, Mapping)
        ):
            raise ValueError(f"{key} must be a list")
        try:
            if key == "reviews":
                result[key] = [
                    r.to_dict() if isinstance(r, Review) else r
                    for r in value or []
                ]
            elif key in ("images", "tags"):
                result[key] = list(value or [])
            else:
                result[key] = value
        except TypeError as exc:
            raise ValueError(f"{key} must be a list") from exc
    return result


@dataclass
class Product:
    """A purchasable artwork in the catalog."""

    id: ProductId
    name: str
    price: float
    category: str = ""
    description: str = ""
    image_url: str = ""
    images: list[str] = field(default_factory=lambda: list[str]())
    tags: list[str] = field(default_factory=lambda: list[str]())
    reviews: list[Review] = field(
        default_factory=lambda: list[Review]()
    )

    @property
    def gallery(self) -> list[str]:
        """Images to display, falling back to the single ``image_url``."""
        if self.images:
            return list(self.images)
        return [self.image_url] if self.image_url else []

    def to_document(self) -> dict[str, Any]:
        """Serialise without the id, as written to the remote catalog."""
        return {
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "description": self.description,
            "image_url": self.image_url,
            "images": list(self.images),
            "tags": list(self.tags),
            "reviews": [r.to_dict() for r in self.reviews],
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialise including the id, as persisted in the cart."""
        return {"id": self.id, **self.to_document()}

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        product_id: ProductId | None = None,
    ) -> "Product":
        """Build a product from a stored or remote document.

        Raises ``ValueError`` on anything that is not a well-formed
        product document, so callers can treat the record as corrupt.
        """
        if not isinstance(data, Mapping):
            raise ValueError(
                f"product document is a {type(data).__name__}, not an object"
            )
        pid = product_id if product_id is not None else data.get("id")
        if pid is None or pid == "":
            raise ValueError("product document has no id")
        try:
            price = float(data.get("price", 0))
            images = [str(i) for i in data.get("images") or []]
            tags = [str(t) for t in data.get("tags") or []]
            reviews = [
                Review.from_dict(r) for r in data.get("reviews") or []
            ]
        except TypeError as exc:
            raise ValueError(f"malformed product {pid}: {exc}") from exc
        if price < 0:
            raise ValueError(f"negative price for product {pid}")
        return cls(
            id=pid,
            name=str(data.get("name", "")),
            price=price,
            category=str(data.get("category", "")),
            description=str(data.get("description", "")),
            image_url=str(data.get("image_url", "")),
            images=images,
            tags=tags,
            reviews=reviews,
        )

    def with_updates(self, updates: Mapping[str, Any]) -> "Product":
        """Return a copy with a partial update applied; the id is kept."""
        merged = self.to_dict()
        merged.update(serialize_fields(updates))
        return Product.from_dict(merged, product_id=self.id)
