# main.py

"""Entry point for the umars_hands storefront (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.services.bootstrap import build_store

logger = logging.getLogger("umars_hands.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="umars_hands",
        description="Umars Hands calligraphy archive and cart.",
        epilog="Run without arguments to open the interactive storefront.",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search the archive by name or description.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Only list works in this category (default: All).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format for listings (default: json).",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Ignore the configured remote catalog.",
    )

    who = parser.add_argument_group("session")
    who.add_argument(
        "--email",
        default=None,
        help="Act as the signed-in user with this email.",
    )
    who.add_argument(
        "--admin",
        action="store_true",
        default=False,
        help="Act as the local administrator.",
    )

    cart = parser.add_argument_group("cart")
    cart.add_argument(
        "--cart",
        action="store_true",
        default=False,
        help="Show the cart (implied by the other cart flags).",
    )
    cart.add_argument(
        "--add",
        action="append",
        default=[],
        metavar="ID",
        help="Add one unit of a product (repeatable).",
    )
    cart.add_argument(
        "--remove",
        action="append",
        default=[],
        metavar="ID",
        help="Remove a product from the cart (repeatable).",
    )
    cart.add_argument(
        "--set-qty",
        nargs=2,
        default=None,
        metavar=("ID", "QTY"),
        dest="set_qty",
        help="Set a cart quantity; 0 removes the line.",
    )
    cart.add_argument(
        "--clear-cart",
        action="store_true",
        default=False,
        dest="clear_cart",
        help="Empty the cart.",
    )
    cart.add_argument(
        "--checkout",
        action="store_true",
        default=False,
        help="Confirm the order and empty the cart.",
    )
    cart.add_argument(
        "--name",
        default="",
        help="Customer name for checkout.",
    )

    admin = parser.add_argument_group("catalog administration")
    admin.add_argument(
        "--seed",
        action="store_true",
        default=False,
        help="Write the bundled catalog to the remote datastore.",
    )
    admin.add_argument(
        "--add-product",
        default=None,
        metavar="JSON",
        dest="add_product",
        help='Create a product, e.g. \'{"name": "X", "price": 10}\'.',
    )
    admin.add_argument(
        "--update-product",
        nargs=2,
        default=None,
        metavar=("ID", "JSON"),
        dest="update_product",
        help="Partially update a product.",
    )
    admin.add_argument(
        "--delete-product",
        default=None,
        metavar="ID",
        dest="delete_product",
        help="Delete a product.",
    )

    reviews = parser.add_argument_group("reviews")
    reviews.add_argument(
        "--reviews",
        default=None,
        metavar="ID",
        help="List the reviews of a product you may see.",
    )
    reviews.add_argument(
        "--write-review",
        nargs=2,
        default=None,
        metavar=("RATING", "TEXT"),
        dest="write_review",
        help="Review the --reviews product (needs --email or --admin).",
    )
    reviews.add_argument(
        "--approve-review",
        default=None,
        metavar="REVIEW_ID",
        dest="approve_review",
        help="Publish a pending review (admin).",
    )
    reviews.add_argument(
        "--delete-review",
        default=None,
        metavar="REVIEW_ID",
        dest="delete_review",
        help="Remove a review (admin).",
    )

    agent = parser.add_argument_group("shopping assistant")
    agent.add_argument(
        "--agent-call",
        default=None,
        metavar="JSON",
        dest="agent_call",
        help=(
            'Apply assistant tool calls, e.g. \'{"name": "add_to_cart", '
            '"args": {"product_id": "2"}}\' or a list of them.'
        ),
    )
    agent.add_argument(
        "--agent-tools",
        action="store_true",
        default=False,
        dest="agent_tools",
        help="Print the assistant tool declarations and catalog context.",
    )
    return parser


def _run_tui(args: argparse.Namespace) -> None:
    """Launch the interactive Textual storefront."""
    from src.cli.runner import resolve_identity
    from src.ui.app import StorefrontApp

    try:
        store = build_store(
            identity=resolve_identity(args.email, args.admin),
            offline=args.offline,
        )
        app = StorefrontApp(store)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("umars_hands TUI shutting down")


async def _run_cli(args: argparse.Namespace) -> int:
    """Run the headless command selected by the flags."""
    from src.cli import runner

    store = build_store(
        identity=runner.resolve_identity(args.email, args.admin),
        offline=args.offline,
    )
    try:
        if args.agent_tools:
            return await runner.cli_agent_tools(store)
        if args.agent_call is not None:
            return await runner.cli_agent(store, args.agent_call)
        if args.reviews is not None:
            return await runner.cli_reviews(
                store,
                args.reviews,
                write=args.write_review,
                approve_id=args.approve_review,
                delete_id=args.delete_review,
            )
        if args.seed or args.add_product or args.update_product or args.delete_product:
            return await runner.cli_admin(
                store,
                seed=args.seed,
                add_json=args.add_product,
                update=args.update_product,
                delete_id=args.delete_product,
            )
        if args.checkout:
            return runner.cli_checkout(store, args.name, args.email or "")
        if args.cart or args.add or args.remove or args.set_qty or args.clear_cart:
            return await runner.cli_cart(
                store,
                add_ids=args.add,
                remove_ids=args.remove,
                set_quantity=args.set_qty,
                clear=args.clear_cart,
            )
        return await runner.cli_catalog(
            store,
            query=args.query or "",
            category=args.category,
            output_format=args.output_format,
        )
    finally:
        store.close()


def _wants_tui(args: argparse.Namespace) -> bool:
    return not any((
        args.query is not None,
        args.category,
        args.cart,
        args.add,
        args.remove,
        args.set_qty,
        args.clear_cart,
        args.checkout,
        args.seed,
        args.add_product,
        args.update_product,
        args.delete_product,
        args.reviews is not None,
        args.agent_call is not None,
        args.agent_tools,
    ))


def main() -> None:
    """Route to the TUI (no command) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()
    if (
        args.write_review or args.approve_review or args.delete_review
    ) and args.reviews is None:
        parser.error("review changes need --reviews ID to pick the product")

    tui = _wants_tui(args)
    log_file = setup_logging(tui=tui)
    logger.info("umars_hands starting, log file: %s", log_file)

    if tui:
        _run_tui(args)
    else:
        sys.exit(asyncio.run(_run_cli(args)))


if __name__ == "__main__":
    main()
