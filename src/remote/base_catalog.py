# src/remote/base_catalog.py

"""Abstract contract for the remote product catalog."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from src.models.product import Product, ProductId

logger = logging.getLogger("umars_hands.remote")


class RemoteCatalogError(Exception):
    """Transport, authorization or decoding failure of the remote catalog."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


SnapshotCallback = Callable[[list[Product]], None]
ErrorCallback = Callable[[RemoteCatalogError], None]


class Subscription:
    """Handle for a live snapshot stream; ``cancel()`` is idempotent."""

    def __init__(self, on_cancel: Callable[[], None]) -> None:
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._on_cancel()


def parse_products(data: object) -> list[Product]:
    """Decode a JSON product list, raising ``RemoteCatalogError`` if bad."""
    if not isinstance(data, list):
        raise RemoteCatalogError("catalog payload is not a list")
    products: list[Product] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise RemoteCatalogError("catalog entry is not an object")
        try:
            products.append(Product.from_dict(entry))
        except (TypeError, ValueError) as exc:
            raise RemoteCatalogError(
                f"malformed catalog entry: {exc}"
            ) from exc
    return products


class RemoteCatalog(ABC):
    """A product datastore that pushes full snapshots ordered by name.

    Every method may raise :class:`RemoteCatalogError`.  Callbacks of a
    subscription may be invoked from a worker thread; consumers must
    hand them over to their own event loop.
    """

    # Whether writes outlive this process
    durable: bool = True

    @abstractmethod
    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        """Start receiving snapshots until the subscription is cancelled.

        After ``on_error`` fires the stream is over; it is not reopened.
        """
        ...

    @abstractmethod
    def fetch_products(self) -> list[Product]:
        """Fetch one snapshot of the catalog, ordered by name."""
        ...

    @abstractmethod
    def create_product(self, document: Mapping[str, Any]) -> str:
        """Create a product and return the id the datastore assigned."""
        ...

    @abstractmethod
    def update_product(
        self, product_id: ProductId, updates: Mapping[str, Any],
    ) -> None:
        """Apply a partial update to an existing product."""
        ...

    @abstractmethod
    def delete_product(self, product_id: ProductId) -> None:
        """Delete a product."""
        ...

    @abstractmethod
    def batch_create(self, documents: list[Mapping[str, Any]]) -> int:
        """Create several products in one write. Returns the count."""
        ...

    def close(self) -> None:
        """Release network resources."""
        logger.debug("%s closed", type(self).__name__)
