# src/ui/app.py

"""Terminal storefront for the Umars Hands archive."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from src.config.settings import Settings
from src.models.cart_item import CartItem
from src.models.product import Product
from src.services.store import Store

logger = logging.getLogger("umars_hands.ui")

_CSS = """
#search_bar { height: auto; }
#search_input { width: 2fr; }
#category_select { width: 1fr; }
#body { height: 1fr; }
#catalog_column { width: 2fr; }
#products_table { height: 2fr; }
#detail { height: 1fr; border-top: solid $accent; padding: 0 1; overflow-y: auto; }
#cart_panel { width: 1fr; border-left: solid $accent; padding: 0 1; }
#cart_total { text-style: bold; padding: 1 0; }
"""


def _money(amount: float) -> str:
    return f"{Settings.CURRENCY_SYMBOL}{amount:,.2f}"


class StorefrontApp(App[object]):
    """Browse the archive, filter it, and manage the cart."""

    CSS = _CSS

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add_to_cart", "Add to cart"),
        Binding("plus", "increase", "+1"),
        Binding("minus", "decrease", "-1"),
        Binding("d", "remove", "Remove"),
        Binding("c", "toggle_cart", "Cart"),
        Binding("x", "checkout", "Checkout"),
    ]

    def __init__(self, store: Store) -> None:
        super().__init__()
        self.store = store
        self.visible_products: list[Product] = []
        self.cart_rows: list[CartItem] = []
        self.detail_text = Text()
        self._categories: list[str] = []

    def compose(self) -> ComposeResult:
        """Build the widget tree for the storefront."""
        self._categories = self.store.categories
        yield Header()
        yield Container(
            Static("Umars Hands - The Archive", id="title"),
            Horizontal(
                Input(
                    placeholder="Search the archive...", id="search_input"
                ),
                Select(
                    [(c, c) for c in self._categories],
                    allow_blank=False,
                    value=Settings.ALL_CATEGORIES,
                    id="category_select",
                ),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            Horizontal(
                Vertical(
                    cast(
                        DataTable[str | Text],
                        DataTable(
                            id="products_table",
                            zebra_stripes=True,
                            cursor_type="row",
                        ),
                    ),
                    Static("", id="detail"),
                    id="catalog_column",
                ),
                Vertical(
                    Static("Your Cart", id="cart_title"),
                    cast(
                        DataTable[str | Text],
                        DataTable(id="cart_table", cursor_type="row"),
                    ),
                    Static("", id="cart_total"),
                    Button("Checkout", variant="primary", id="checkout_btn"),
                    id="cart_panel",
                ),
                id="body",
            ),
            id="main_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Set up tables, subscribe to the store and go live."""
        self._products_table().add_columns(
            "Name", "Category", "Price", "Tags",
        )
        self._cart_table().add_columns("Name", "Qty", "Line")
        self.store.add_listener(self.refresh_views)
        await self.store.open()
        self.refresh_views()

    def on_unmount(self) -> None:
        self.store.close()

    # ── Rendering ────────────────────────────────────────

    def _products_table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )

    def _cart_table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#cart_table", DataTable),
        )

    def refresh_views(self) -> None:
        """Redraw everything derived from the store."""
        self._sync_categories()
        self.populate_products()
        self.populate_cart()
        self.show_detail()
        status = self.query_one("#status", Static)
        source = (
            "bundled catalog" if self.store.is_fallback_catalog
            else "live catalog"
        )
        status.update(
            f"{len(self.visible_products)} of {len(self.store.products)} "
            f"works ({source}) | {self.store.identity.role}"
        )

    def _sync_categories(self) -> None:
        categories = self.store.categories
        if categories == self._categories:
            return
        self._categories = categories
        select = cast(
            Select[str], self.query_one("#category_select", Select)
        )
        select.set_options([(c, c) for c in categories])
        if self.store.selected_category in categories:
            select.value = self.store.selected_category

    def populate_products(self) -> None:
        """Fill the products table with the filtered archive view."""
        table = self._products_table()
        table.clear()
        self.visible_products = self.store.filtered_products
        for p in self.visible_products:
            table.add_row(
                p.name,
                p.category,
                Text(_money(p.price), style="green"),
                ", ".join(p.tags),
            )

    def show_detail(self) -> None:
        """Describe the highlighted work and the reviews this session sees."""
        detail = self.query_one("#detail", Static)
        product = self._highlighted_product()
        if product is None:
            self.detail_text = Text()
            detail.update(self.detail_text)
            return
        # Text, not markup: review bodies are user input
        text = Text()
        text.append(product.name, style="bold")
        text.append(f"  {_money(product.price)}\n", style="green")
        text.append(f"{product.description}\n\n")
        reviews = self.store.visible_reviews(product)
        if not reviews:
            text.append("No reviews yet.", style="dim")
        for r in reviews:
            text.append("★" * r.rating, style="yellow")
            text.append(f" {r.name}, {r.date}")
            if self.store.identity.is_admin:
                text.append(f" ({r.status})", style="magenta")
            text.append(f": {r.text}\n")
        self.detail_text = text
        detail.update(text)

    def populate_cart(self) -> None:
        """Fill the cart panel and show or hide it."""
        table = self._cart_table()
        table.clear()
        self.cart_rows = self.store.cart
        for item in self.cart_rows:
            table.add_row(
                item.product.name,
                str(item.quantity),
                _money(item.line_total),
            )
        total = self.query_one("#cart_total", Static)
        total.update(f"Total: {_money(self.store.cart_total)}")
        self.query_one("#cart_panel").display = self.store.is_cart_open

    # ── Events ───────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search_input":
            self.store.set_search_query(event.value)

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "category_select" and isinstance(event.value, str):
            self.store.set_selected_category(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "checkout_btn":
            self.action_checkout()

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted
    ) -> None:
        if event.data_table.id == "products_table":
            self.show_detail()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Enter on a product row adds it to the cart."""
        if event.data_table.id == "products_table":
            self.action_add_to_cart()

    # ── Actions ──────────────────────────────────────────

    def _highlighted_product(self) -> Product | None:
        row = self._products_table().cursor_row
        if 0 <= row < len(self.visible_products):
            return self.visible_products[row]
        return None

    def _selected_cart_item(self) -> CartItem | None:
        row = self._cart_table().cursor_row
        if 0 <= row < len(self.cart_rows):
            return self.cart_rows[row]
        return None

    def action_add_to_cart(self) -> None:
        """Add the highlighted product to the cart."""
        product = self._highlighted_product()
        if product is None:
            self.notify("Select a work first", severity="warning")
            return
        self.store.add_to_cart(product)
        self.notify(f"Added {product.name}")

    def action_increase(self) -> None:
        item = self._selected_cart_item()
        if item is not None:
            self.store.update_quantity(item.product.id, item.quantity + 1)

    def action_decrease(self) -> None:
        item = self._selected_cart_item()
        if item is not None:
            self.store.update_quantity(item.product.id, item.quantity - 1)

    def action_remove(self) -> None:
        item = self._selected_cart_item()
        if item is not None:
            self.store.remove_from_cart(item.product.id)

    def action_toggle_cart(self) -> None:
        self.store.toggle_cart()

    def action_checkout(self) -> None:
        """Confirm the order for the current cart."""
        try:
            receipt = self.store.checkout()
        except ValueError:
            self.notify("Your cart is empty", severity="warning")
            return
        logger.info("Checkout from TUI, total %.2f", receipt.total)
        self.notify(
            f"Order confirmed: {len(receipt.items)} works, "
            f"{_money(receipt.total)}"
        )
