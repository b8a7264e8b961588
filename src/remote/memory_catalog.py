# src/remote/memory_catalog.py

"""In-process stand-in for the remote catalog."""

import itertools
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from src.models.product import Product, ProductId, serialize_fields
from src.remote.base_catalog import (
    ErrorCallback,
    RemoteCatalog,
    RemoteCatalogError,
    SnapshotCallback,
    Subscription,
)

logger = logging.getLogger("umars_hands.remote.memory")


class MemoryRemoteCatalog(RemoteCatalog):
    """Keeps documents in a dict and pushes a snapshot after each write.

    Used when no catalog URL is configured and in tests.  With
    ``read_only=True`` every write is rejected the way a datastore with
    deny-all security rules would reject it.  Subscribers are called
    synchronously from whichever thread performed the write.
    """

    durable = False

    def __init__(
        self,
        products: Iterable[Product] = (),
        read_only: bool = False,
    ) -> None:
        self.read_only = read_only
        self._docs: dict[str, dict[str, Any]] = {
            str(p.id): p.to_document() for p in products
        }
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        self._subscribers: list[tuple[SnapshotCallback, ErrorCallback]] = []

    # ── Reading ──────────────────────────────────────────

    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        entry = (on_snapshot, on_error)
        with self._lock:
            self._subscribers.append(entry)
            snapshot = self._snapshot()

        def _remove() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        on_snapshot(snapshot)
        return Subscription(_remove)

    def fetch_products(self) -> list[Product]:
        with self._lock:
            return self._snapshot()

    # ── Writing ──────────────────────────────────────────

    def create_product(self, document: Mapping[str, Any]) -> str:
        self._check_writable("create")
        doc = self._document(document)
        with self._lock:
            new_id = self._new_id()
            self._docs[new_id] = doc
        logger.debug("Created document %s", new_id)
        self._broadcast()
        return new_id

    def update_product(
        self, product_id: ProductId, updates: Mapping[str, Any],
    ) -> None:
        self._check_writable("update")
        key = str(product_id)
        with self._lock:
            if key not in self._docs:
                raise RemoteCatalogError(
                    f"no document {key} to update", status=404,
                )
            self._docs[key] = self._document(updates, self._docs[key], key)
        self._broadcast()

    def delete_product(self, product_id: ProductId) -> None:
        self._check_writable("delete")
        with self._lock:
            self._docs.pop(str(product_id), None)
        self._broadcast()

    def batch_create(self, documents: list[Mapping[str, Any]]) -> int:
        self._check_writable("batch create")
        docs = [self._document(d) for d in documents]
        with self._lock:
            for doc in docs:
                self._docs[self._new_id()] = doc
        self._broadcast()
        return len(documents)

    # ── Internals ────────────────────────────────────────

    def _check_writable(self, operation: str) -> None:
        if self.read_only:
            raise RemoteCatalogError(
                f"permission denied for {operation}", status=403,
            )

    @staticmethod
    def _document(
        fields: Mapping[str, Any],
        base: Mapping[str, Any] | None = None,
        key: str = "new",
    ) -> dict[str, Any]:
        """Merge *fields* over *base*, refusing non-product documents."""
        try:
            doc = {**(base or {}), **serialize_fields(fields)}
            Product.from_dict(doc, product_id=key)
        except ValueError as exc:
            raise RemoteCatalogError(
                f"invalid document {key}: {exc}", status=400,
            ) from exc
        return doc

    def _new_id(self) -> str:
        new_id = f"doc-{next(self._ids)}"
        while new_id in self._docs:
            new_id = f"doc-{next(self._ids)}"
        return new_id

    def _snapshot(self) -> list[Product]:
        products = [
            Product.from_dict(doc, product_id=key)
            for key, doc in self._docs.items()
        ]
        return sorted(products, key=lambda p: p.name)

    def _broadcast(self) -> None:
        with self._lock:
            snapshot = self._snapshot()
            subscribers = list(self._subscribers)
        for on_snapshot, _on_error in subscribers:
            on_snapshot(list(snapshot))
