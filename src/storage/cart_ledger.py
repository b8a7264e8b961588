# src/storage/cart_ledger.py

"""Persistent shopping cart, independent of sign-in state."""

import json
import logging
import sqlite3
from collections.abc import Callable
from typing import Any, cast

from src.config.settings import Settings
from src.models.cart_item import CartItem
from src.models.product import Product, ProductId, ids_match
from src.storage.local_storage import LocalStorage

logger = logging.getLogger("umars_hands.cart")


def serialize_cart(items: list[CartItem]) -> str:
    """Encode the ledger as the JSON document kept in local storage."""
    return json.dumps(
        [
            {"product": item.product.to_dict(), "quantity": item.quantity}
            for item in items
        ],
        ensure_ascii=False,
    )


def deserialize_cart(raw: str) -> list[CartItem]:
    """Decode a stored ledger.

    Raises ``ValueError`` (or ``TypeError``/``KeyError``) when the record
    is not a list of ``{"product": {...}, "quantity": n}`` entries with
    positive integer quantities and distinct product ids.
    """
    data: object = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("stored cart is not a list")

    items: list[CartItem] = []
    seen: set[str] = set()
    for entry in cast(list[Any], data):
        if not isinstance(entry, dict):
            raise ValueError("stored cart entry is not an object")
        row = cast(dict[str, Any], entry)
        quantity = row["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(f"bad quantity {quantity!r}")
        if quantity < 1:
            raise ValueError(f"non-positive quantity {quantity}")
        product = Product.from_dict(row["product"])
        if str(product.id) in seen:
            raise ValueError(f"duplicate cart entry for {product.id}")
        seen.add(str(product.id))
        items.append(CartItem(product=product, quantity=quantity))
    return items


class CartLedger:
    """Ordered record of what the current user intends to buy.

    The ledger is read from local storage once, at construction, and
    rewritten whole after every change.  A missing or unreadable record
    starts an empty cart.
    """

    def __init__(
        self,
        storage: LocalStorage,
        storage_key: str | None = None,
    ) -> None:
        self._storage = storage
        self._key = storage_key or Settings.CART_STORAGE_KEY
        self._items: list[CartItem] = self._rehydrate()
        self._listeners: list[Callable[[], None]] = []
        self.is_open = False

    # ── Reading ──────────────────────────────────────────

    @property
    def items(self) -> list[CartItem]:
        """Copies of the cart lines, in insertion order."""
        return [
            CartItem(product=i.product, quantity=i.quantity)
            for i in self._items
        ]

    @property
    def cart_subtotal(self) -> float:
        return sum(
            (i.product.price * i.quantity for i in self._items), 0.0
        )

    @property
    def cart_total(self) -> float:
        # No tax or shipping is charged.
        return self.cart_subtotal

    @property
    def item_count(self) -> int:
        """Total units in the cart, for the cart badge."""
        return sum(i.quantity for i in self._items)

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback invoked after every cart change."""
        self._listeners.append(listener)

    # ── Commands ─────────────────────────────────────────

    def add_to_cart(self, product: Product) -> None:
        """Add one unit of *product* and reveal the cart."""
        for item in self._items:
            if ids_match(item.product.id, product.id):
                item.quantity += 1
                logger.info(
                    "Cart quantity for %s raised to %d",
                    product.id,
                    item.quantity,
                )
                break
        else:
            self._items.append(CartItem(product=product, quantity=1))
            logger.info("Added %s to cart", product.id)
        self.is_open = True
        self._commit()

    def remove_from_cart(self, product_id: ProductId) -> None:
        """Drop the line for *product_id*; absent ids are ignored."""
        kept = [
            i for i in self._items if not ids_match(i.product.id, product_id)
        ]
        if len(kept) == len(self._items):
            return
        self._items = kept
        logger.info("Removed %s from cart", product_id)
        self._commit()

    def update_quantity(self, product_id: ProductId, quantity: int) -> None:
        """Set a line's quantity; zero or below removes the line."""
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        for item in self._items:
            if ids_match(item.product.id, product_id):
                item.quantity = quantity
                logger.info(
                    "Cart quantity for %s set to %d", product_id, quantity,
                )
                self._commit()
                return

    def clear_cart(self) -> None:
        """Empty the ledger (after a completed checkout)."""
        self._items = []
        logger.info("Cart cleared")
        self._commit()

    def toggle_cart(self) -> None:
        self.is_open = not self.is_open
        self._notify()

    def open_cart(self) -> None:
        if not self.is_open:
            self.is_open = True
            self._notify()

    # ── Persistence ──────────────────────────────────────

    def _rehydrate(self) -> list[CartItem]:
        try:
            raw = self._storage.get_item(self._key)
        except sqlite3.Error:
            logger.warning(
                "Could not read stored cart under '%s', starting empty",
                self._key,
                exc_info=True,
            )
            return []
        if raw is None:
            return []
        try:
            items = deserialize_cart(raw)
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning(
                "Stored cart under '%s' is unreadable, starting empty: %s",
                self._key,
                exc,
            )
            return []
        logger.info("Rehydrated cart with %d lines", len(items))
        return items

    def _commit(self) -> None:
        try:
            self._storage.set_item(self._key, serialize_cart(self._items))
        except sqlite3.Error:
            logger.error(
                "Failed to persist cart under '%s'",
                self._key,
                exc_info=True,
            )
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()
