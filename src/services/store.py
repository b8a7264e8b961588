# src/services/store.py

"""The store facade: one object every surface talks to."""

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from types import TracebackType
from typing import Any

from src.config.settings import Settings
from src.filters.product_filter import ProductFilter
from src.models.cart_item import CartItem
from src.models.identity import Identity, guest
from src.models.product import Product, ProductId
from src.models.review import Review, visible_reviews
from src.remote.base_catalog import (
    RemoteCatalog,
    RemoteCatalogError,
    Subscription,
)
from src.services.mutation_gateway import MutationGateway, MutationOutcome
from src.storage.cart_ledger import CartLedger
from src.storage.catalog_snapshot import CatalogSnapshotStore
from src.storage.local_storage import LocalStorage

logger = logging.getLogger("umars_hands.store")


@dataclass
class CheckoutReceipt:
    """What was bought, by whom, for how much."""

    customer_name: str
    customer_email: str
    items: list[CartItem]
    total: float
    placed_at: datetime = field(default_factory=datetime.now)


class Store:
    """Composes the catalog, the filters, the cart and catalog writes.

    Build one per session and hand it to the UI, the CLI and the
    assistant; nothing else touches the catalog snapshot or the cart
    ledger.  ``identity.is_admin`` is the single privilege check for
    catalog writes and pending-review visibility.

    The catalog shows the fallback list from construction on.
    ``open()`` starts the live remote subscription and ``close()``
    cancels it; ``async with Store(...)`` does both.
    """

    def __init__(
        self,
        remote: RemoteCatalog,
        storage: LocalStorage,
        identity: Identity | None = None,
        fallback: Sequence[Product] | None = None,
        storage_key: str | None = None,
    ) -> None:
        self.identity = identity or guest()
        self._remote = remote
        self._catalog = CatalogSnapshotStore(fallback)
        self._cart = CartLedger(storage, storage_key)
        self._gateway = MutationGateway(
            remote, self._catalog, seed_products=fallback,
        )
        self._search_query = ""
        self._selected_category = Settings.ALL_CATEGORIES
        self._subscription: Subscription | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._listeners: list[Callable[[], None]] = []

        self._catalog.add_listener(self._notify)
        self._cart.add_listener(self._notify)
        self._catalog.initialize()

    # ── Lifecycle ────────────────────────────────────────

    async def open(self) -> None:
        """Start the long-lived remote catalog subscription."""
        if self._subscription is not None:
            return
        self._loop = asyncio.get_running_loop()
        try:
            self._subscription = self._remote.subscribe(
                self._handle_snapshot, self._handle_error,
            )
        except RemoteCatalogError as exc:
            self._catalog.on_remote_error(exc)

    def close(self) -> None:
        """Cancel the subscription; issued mutations still complete."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
            logger.info("Catalog subscription closed")

    async def __aenter__(self) -> "Store":
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def refresh(self) -> None:
        """Pull one remote snapshot, for callers without a live stream."""
        try:
            products = await asyncio.to_thread(self._remote.fetch_products)
        except RemoteCatalogError as exc:
            self._catalog.on_remote_error(exc)
            return
        self._catalog.on_remote_update(products)

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run after any catalog, filter or cart change."""
        self._listeners.append(listener)

    def set_identity(self, identity: Identity) -> None:
        self.identity = identity
        logger.info("Session identity is now %s", identity.role)
        self._notify()

    # ── Catalog & filters ────────────────────────────────

    @property
    def products(self) -> list[Product]:
        return self._catalog.products

    @property
    def is_fallback_catalog(self) -> bool:
        return self._catalog.is_fallback

    @property
    def is_remote_durable(self) -> bool:
        """False when catalog writes only live as long as this process."""
        return self._remote.durable

    def get_product(self, product_id: ProductId) -> Product | None:
        return self._catalog.get(product_id)

    @property
    def search_query(self) -> str:
        return self._search_query

    def set_search_query(self, query: str) -> None:
        self._search_query = query
        self._notify()

    @property
    def selected_category(self) -> str:
        return self._selected_category

    def set_selected_category(self, category: str) -> None:
        self._selected_category = category or Settings.ALL_CATEGORIES
        self._notify()

    @property
    def filtered_products(self) -> list[Product]:
        return ProductFilter.project(
            self._catalog.products,
            self._search_query,
            self._selected_category,
        )

    @property
    def categories(self) -> list[str]:
        return ProductFilter.categories(self._catalog.products)

    def visible_reviews(self, product: Product) -> list[Review]:
        return visible_reviews(product.reviews, self.identity.is_admin)

    # ── Cart ─────────────────────────────────────────────

    @property
    def cart(self) -> list[CartItem]:
        return self._cart.items

    @property
    def cart_subtotal(self) -> float:
        return self._cart.cart_subtotal

    @property
    def cart_total(self) -> float:
        return self._cart.cart_total

    @property
    def cart_count(self) -> int:
        return self._cart.item_count

    @property
    def is_cart_open(self) -> bool:
        return self._cart.is_open

    def toggle_cart(self) -> None:
        self._cart.toggle_cart()

    def open_cart(self) -> None:
        self._cart.open_cart()

    def add_to_cart(self, product: Product) -> None:
        self._cart.add_to_cart(product)

    def remove_from_cart(self, product_id: ProductId) -> None:
        self._cart.remove_from_cart(product_id)

    def update_quantity(self, product_id: ProductId, quantity: int) -> None:
        self._cart.update_quantity(product_id, quantity)

    def clear_cart(self) -> None:
        self._cart.clear_cart()

    def checkout(
        self,
        customer_name: str = "",
        customer_email: str = "",
    ) -> CheckoutReceipt:
        """Confirm the order and empty the cart.

        Raises ``ValueError`` when the cart is empty.
        """
        items = self._cart.items
        if not items:
            raise ValueError("cannot check out an empty cart")
        receipt = CheckoutReceipt(
            customer_name=customer_name or self.identity.display_name,
            customer_email=customer_email or self.identity.email,
            items=items,
            total=self._cart.cart_total,
        )
        self._cart.clear_cart()
        logger.info(
            "Checkout completed: %d lines, total %.2f",
            len(receipt.items),
            receipt.total,
        )
        return receipt

    # ── Catalog writes ───────────────────────────────────

    async def add_product(
        self, data: Mapping[str, Any],
    ) -> MutationOutcome:
        self._require_admin("add products")
        return await self._gateway.add_product(data)

    async def update_product(
        self, product_id: ProductId, updates: Mapping[str, Any],
    ) -> MutationOutcome:
        self._require_admin("update products")
        return await self._gateway.update_product(product_id, updates)

    async def delete_product(
        self, product_id: ProductId,
    ) -> MutationOutcome:
        self._require_admin("delete products")
        return await self._gateway.delete_product(product_id)

    async def seed_database(self) -> bool:
        self._require_admin("seed the catalog")
        return await self._gateway.seed_database()

    async def update_reviews(
        self, product_id: ProductId, reviews: list[Review],
    ) -> MutationOutcome:
        """Replace a product's review list; any signed-in user may."""
        if not self.identity.is_signed_in:
            raise PermissionError("sign in to review products")
        return await self._gateway.update_product(
            product_id, {"reviews": reviews},
        )

    # ── Internals ────────────────────────────────────────

    def _require_admin(self, action: str) -> None:
        if not self.identity.is_admin:
            raise PermissionError(f"only administrators may {action}")

    def _handle_snapshot(self, products: list[Product]) -> None:
        self._run_on_loop(self._catalog.on_remote_update, products)

    def _handle_error(self, err: RemoteCatalogError) -> None:
        self._run_on_loop(self._catalog.on_remote_error, err)

    def _run_on_loop(self, fn: Callable[[Any], None], arg: Any) -> None:
        """Apply a subscription callback on the store's event loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            fn(arg)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            fn(arg)
        else:
            loop.call_soon_threadsafe(fn, arg)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()
