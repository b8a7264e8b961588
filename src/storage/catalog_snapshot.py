# src/storage/catalog_snapshot.py

"""In-memory holder of the current product catalog."""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from src.data.fallback_catalog import fallback_products
from src.models.product import Product, ProductId, ids_match

logger = logging.getLogger("umars_hands.catalog")

LOCAL_ID_PREFIX = "local-"


class CatalogSnapshotStore:
    """Holds "the current product list" as one consistent value.

    The list starts as the bundled fallback and is replaced wholesale by
    each non-empty remote snapshot.  An empty snapshot or a broken remote
    channel puts the fallback back, so viewers never see an empty catalog
    because of the remote side.  Products are never mutated in place;
    local edits swap in new :class:`Product` objects.
    """

    def __init__(
        self, fallback: Sequence[Product] | None = None,
    ) -> None:
        self._fallback: list[Product] = (
            list(fallback) if fallback is not None else fallback_products()
        )
        self._products: list[Product] = []
        self._is_fallback = True
        self._listeners: list[Callable[[], None]] = []

    # ── Reading ──────────────────────────────────────────

    @property
    def products(self) -> list[Product]:
        """A copy of the current catalog, in snapshot order."""
        return list(self._products)

    @property
    def fallback(self) -> list[Product]:
        return list(self._fallback)

    @property
    def is_fallback(self) -> bool:
        """True while the catalog shows the bundled list."""
        return self._is_fallback

    def get(self, product_id: ProductId) -> Product | None:
        """Look up a product by id (string-insensitive)."""
        for product in self._products:
            if ids_match(product.id, product_id):
                return product
        return None

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback invoked after every catalog change."""
        self._listeners.append(listener)

    # ── Remote producer ──────────────────────────────────

    def initialize(self) -> None:
        """Show the fallback list immediately, before any remote reply."""
        self._use_fallback()
        logger.info(
            "Catalog initialised with %d fallback products",
            len(self._products),
        )

    def on_remote_update(self, new_list: Sequence[Product]) -> None:
        """Replace the catalog with a remote snapshot.

        An empty snapshot keeps (or restores) the fallback list.
        """
        if not new_list:
            logger.info(
                "Remote snapshot is empty, keeping fallback catalog"
            )
            self._use_fallback()
            return

        incoming = {str(p.id) for p in new_list}
        dropped = [
            p.id
            for p in self._products
            if str(p.id).startswith(LOCAL_ID_PREFIX)
            and str(p.id) not in incoming
        ]
        if dropped:
            logger.warning(
                "Remote snapshot discarded %d unsynced local products: %s",
                len(dropped),
                dropped,
            )

        self._products = list(new_list)
        self._is_fallback = False
        logger.debug(
            "Catalog replaced by remote snapshot (%d products)",
            len(self._products),
        )
        self._notify()

    def on_remote_error(self, err: BaseException) -> None:
        """Fall back to the bundled list; never raises."""
        logger.warning(
            "Remote catalog error, using local fallback: %s", err,
        )
        self._use_fallback()

    # ── Local optimistic edits (mutation gateway only) ───

    def append_local(self, product: Product) -> None:
        """Append a product that the remote catalog did not accept."""
        self._products = [*self._products, product]
        logger.info("Appended local-only product %s", product.id)
        self._notify()

    def patch_local(
        self, product_id: ProductId, updates: Mapping[str, Any],
    ) -> bool:
        """Apply a partial update to the matching product.

        Returns whether a product matched.
        """
        found = False
        patched: list[Product] = []
        for product in self._products:
            if ids_match(product.id, product_id):
                patched.append(product.with_updates(updates))
                found = True
            else:
                patched.append(product)
        if not found:
            logger.debug(
                "Local patch skipped, no product %s", product_id,
            )
            return False
        self._products = patched
        logger.info("Patched product %s locally", product_id)
        self._notify()
        return True

    def remove_local(self, product_id: ProductId) -> bool:
        """Drop the matching product. Returns whether one was removed."""
        kept = [
            p for p in self._products if not ids_match(p.id, product_id)
        ]
        if len(kept) == len(self._products):
            return False
        self._products = kept
        logger.info("Removed product %s locally", product_id)
        self._notify()
        return True

    # ── Internals ────────────────────────────────────────

    def _use_fallback(self) -> None:
        self._products = list(self._fallback)
        self._is_fallback = True
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()
