# src/cli/runner.py

"""Headless storefront commands built on the store facade."""

import json
import logging
import sys
from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from src.config.settings import Settings
from src.models.identity import Identity, guest, local_admin, signed_in
from src.models.product import Product
from src.models.review import APPROVED
from src.services.agent_actions import TOOL_DECLARATIONS, AgentActions
from src.services.review_service import ReviewService
from src.services.store import Store

logger = logging.getLogger("umars_hands.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_identity(email: str | None, admin: bool) -> Identity:
    """Map CLI flags to a session identity."""
    if admin:
        return local_admin()
    if email:
        return signed_in(user_id=email, email=email)
    return guest()


def _money(amount: float) -> str:
    return f"{Settings.CURRENCY_SYMBOL}{amount:,.2f}"


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [p.to_dict() for p in products]


def _print_catalog_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Archive",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Tags", style="dim")

    for p in products:
        table.add_row(
            str(p.id),
            p.name,
            p.category,
            _money(p.price),
            ", ".join(p.tags) or "-",
        )

    Console().print(table)


def print_cart(store: Store) -> None:
    """Render the cart and its total to stdout."""
    items = store.cart
    if not items:
        _err.print("[yellow]Your cart is empty.[/yellow]")
        return

    table = Table(title="Cart", show_lines=True, title_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Qty", justify="right")
    table.add_column("Unit", justify="right")
    table.add_column("Line", justify="right", style="green")
    for item in items:
        table.add_row(
            str(item.product.id),
            item.product.name,
            str(item.quantity),
            _money(item.product.price),
            _money(item.line_total),
        )
    table.add_section()
    table.add_row("", "Total", str(store.cart_count), "", _money(store.cart_total))
    Console().print(table)


def _parse_product_json(raw: str) -> Mapping[str, Any]:
    """Parse a JSON object given on the command line."""
    try:
        data: object = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid product JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("product JSON must be an object")
    return data


def _report_source(store: Store) -> None:
    if store.is_fallback_catalog:
        _err.print("[dim]Showing the bundled catalog (remote unavailable or empty)[/dim]")


async def cli_catalog(
    store: Store,
    query: str,
    category: str | None,
    output_format: str,
) -> int:
    """List the filtered catalog and return an exit code (0=ok, 1=none)."""
    await store.refresh()
    _report_source(store)
    store.set_search_query(query)
    store.set_selected_category(category or Settings.ALL_CATEGORIES)

    products = store.filtered_products
    _err.print(
        f"[bold]Archive:[/bold] query={query!r} "
        f"[dim]category={store.selected_category}[/dim]"
    )
    if not products:
        _err.print("[yellow]No matching works.[/yellow]")
        return 1

    _err.print(
        f"[green]✓ {len(products)} of {len(store.products)} works[/green]"
    )
    if output_format == "table":
        _print_catalog_table(products)
    else:
        json.dump(
            _products_to_dicts(products),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_cart(
    store: Store,
    add_ids: list[str],
    remove_ids: list[str],
    set_quantity: list[str] | None,
    clear: bool,
) -> int:
    """Apply cart edits in order (clear, add, remove, set) and print it."""
    await store.refresh()
    status = 0

    if clear:
        store.clear_cart()
    for product_id in add_ids:
        product = store.get_product(product_id)
        if product is None:
            _err.print(f"[red]Unknown product: {product_id}[/red]")
            status = 1
            continue
        store.add_to_cart(product)
        _err.print(f"[green]Added {product.name}[/green]")
    for product_id in remove_ids:
        store.remove_from_cart(product_id)
    if set_quantity:
        product_id, raw_qty = set_quantity
        try:
            store.update_quantity(product_id, int(raw_qty))
        except ValueError:
            _err.print(f"[red]Quantity must be an integer: {raw_qty}[/red]")
            status = 1

    print_cart(store)
    return status


def cli_checkout(store: Store, name: str, email: str) -> int:
    """Complete checkout of the current cart."""
    try:
        receipt = store.checkout(customer_name=name, customer_email=email)
    except ValueError as exc:
        _err.print(f"[yellow]{exc}[/yellow]")
        return 1

    _err.print(
        f"[green]✓ Order confirmed for {receipt.customer_name or 'Guest'}"
        f" - {len(receipt.items)} works, {_money(receipt.total)}[/green]"
    )
    return 0


async def cli_admin(
    store: Store,
    seed: bool,
    add_json: str | None,
    update: list[str] | None,
    delete_id: str | None,
) -> int:
    """Run catalog maintenance commands as an administrator."""
    await store.refresh()
    if not store.is_remote_durable:
        _err.print(
            "[yellow]No remote catalog configured: changes go to an "
            "in-memory catalog and are lost when this command exits. "
            "Set CATALOG_API_URL to persist them.[/yellow]"
        )
    try:
        if seed:
            ok = await store.seed_database()
            if not ok:
                _err.print("[red]Seeding failed, see log[/red]")
                return 1
            _report_outcome(store, "Seeded catalog", "remote")
        if add_json is not None:
            outcome = await store.add_product(_parse_product_json(add_json))
            _report_outcome(store, "Added product", outcome)
        if update:
            product_id, raw = update
            outcome = await store.update_product(
                product_id, _parse_product_json(raw),
            )
            _report_outcome(store, f"Updated {product_id}", outcome)
        if delete_id is not None:
            outcome = await store.delete_product(delete_id)
            _report_outcome(store, f"Deleted {delete_id}", outcome)
    except PermissionError as exc:
        logger.warning("Admin command refused: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 1
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    return 0


def _report_outcome(store: Store, action: str, outcome: str) -> None:
    if outcome != "remote":
        _err.print(
            f"[yellow]{action} locally only (remote write failed)[/yellow]"
        )
    elif store.is_remote_durable:
        _err.print(f"[green]✓ {action}[/green]")
    else:
        _err.print(f"[yellow]✓ {action} (in-memory only)[/yellow]")


# ── Reviews ──────────────────────────────────────────────


def _print_reviews(store: Store, product: Product) -> None:
    """Render the reviews this session may see for *product*."""
    reviews = store.visible_reviews(product)
    if not reviews:
        _err.print(f"[dim]No reviews for {product.name} yet.[/dim]")
        return

    table = Table(
        title=f"Reviews - {product.name}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("By")
    table.add_column("Rating", justify="right")
    table.add_column("Date", style="dim")
    table.add_column("Review", max_width=50)
    if store.identity.is_admin:
        table.add_column("Status", style="magenta")
    for r in reviews:
        row: list[str | Text] = [
            r.id, Text(r.name), "★" * r.rating, r.date, Text(r.text),
        ]
        if store.identity.is_admin:
            row.append(r.status)
        table.add_row(*row)
    Console().print(table)


async def cli_reviews(
    store: Store,
    product_id: str,
    write: list[str] | None = None,
    approve_id: str | None = None,
    delete_id: str | None = None,
) -> int:
    """Write or moderate reviews of one product, then list them."""
    await store.refresh()
    service = ReviewService(store)
    try:
        if write:
            raw_rating, text = write
            try:
                rating = int(raw_rating)
            except ValueError:
                raise ValueError(
                    f"rating must be a number 1-5, got {raw_rating!r}"
                ) from None
            outcome = await service.submit_review(product_id, rating, text)
            _report_outcome(store, "Review submitted", outcome)
            if not store.identity.is_admin:
                _err.print("[dim]It will appear once approved.[/dim]")
        if approve_id is not None:
            outcome = await service.set_review_status(
                product_id, approve_id, APPROVED,
            )
            _report_outcome(store, f"Approved {approve_id}", outcome)
        if delete_id is not None:
            outcome = await service.delete_review(product_id, delete_id)
            _report_outcome(store, f"Deleted review {delete_id}", outcome)
    except PermissionError as exc:
        logger.warning("Review command refused: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 1
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    product = store.get_product(product_id)
    if product is None:
        _err.print(f"[red]Unknown product: {product_id}[/red]")
        return 1
    _print_reviews(store, product)
    return 0


# ── Shopping assistant ───────────────────────────────────


async def cli_agent_tools(store: Store) -> int:
    """Print the tool declarations and catalog the assistant works with."""
    await store.refresh()
    json.dump(
        {
            "tools": TOOL_DECLARATIONS,
            "catalog": AgentActions(store).catalog_context(),
        },
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0


def _parse_tool_calls(raw: str) -> list[Mapping[str, Any]]:
    """Accept one ``{"name", "args"}`` object or a list of them."""
    try:
        data: object = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid tool call JSON: {exc}") from exc
    calls = data if isinstance(data, list) else [data]
    if not all(isinstance(c, dict) for c in calls):
        raise ValueError("each tool call must be an object")
    return calls


async def cli_agent(store: Store, raw_calls: str) -> int:
    """Apply assistant tool calls and print the resulting view state."""
    await store.refresh()
    try:
        calls = _parse_tool_calls(raw_calls)
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    applied = AgentActions(store).dispatch_all(calls)
    _err.print(f"[bold]Applied {applied} of {len(calls)} tool calls[/bold]")
    json.dump(
        {
            "applied": applied,
            "search_query": store.search_query,
            "category": store.selected_category,
            "products": [p.id for p in store.filtered_products],
            "cart_open": store.is_cart_open,
            "cart": [
                {"id": i.product.id, "quantity": i.quantity}
                for i in store.cart
            ],
        },
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0 if applied == len(calls) else 1
