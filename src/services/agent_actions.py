# src/services/agent_actions.py

"""Side effects the shopping assistant may trigger through tool calls."""

import logging
from collections.abc import Mapping
from typing import Any

from src.config.settings import Settings
from src.services.store import Store

logger = logging.getLogger("umars_hands.agent")

# Function declarations offered to the language model.
TOOL_DECLARATIONS: list[dict[str, Any]] = [
    {
        "name": "filter_products",
        "description": "Filter the products shown in the archive view.",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The search query for name or description.",
                },
                "category": {
                    "type": "string",
                    "description": (
                        "The category to filter by "
                        "(e.g. 'Classical Thuluth', 'All')."
                    ),
                },
            },
            "required": ["query", "category"],
        },
    },
    {
        "name": "add_to_cart",
        "description": "Add a product to the cart by its ID.",
        "parameters": {
            "type": "object",
            "properties": {
                "product_id": {
                    "type": "string",
                    "description": "The ID of the product to add.",
                },
            },
            "required": ["product_id"],
        },
    },
    {
        "name": "show_cart",
        "description": "Open the cart sidebar.",
        "parameters": {"type": "object", "properties": {}},
    },
]


class AgentActions:
    """Dispatches assistant tool calls onto the store facade."""

    def __init__(self, store: Store) -> None:
        self.store = store

    def catalog_context(self) -> list[dict[str, Any]]:
        """Compact product list the assistant is allowed to refer to."""
        return [
            {
                "id": p.id,
                "name": p.name,
                "category": p.category,
                "price": p.price,
                "description": p.description,
            }
            for p in self.store.products
        ]

    def dispatch(self, name: str, args: Mapping[str, Any]) -> bool:
        """Apply one tool call. Returns whether it had an effect.

        Unknown tools and unknown product ids are logged and ignored.
        """
        if name == "filter_products":
            self.store.set_search_query(str(args.get("query") or ""))
            self.store.set_selected_category(
                str(args.get("category") or Settings.ALL_CATEGORIES)
            )
            return True

        if name == "add_to_cart":
            product_id = args.get("product_id")
            product = (
                self.store.get_product(product_id)
                if product_id is not None
                else None
            )
            if product is None:
                logger.warning(
                    "Assistant asked for unknown product %r", product_id,
                )
                return False
            self.store.add_to_cart(product)
            return True

        if name == "show_cart":
            self.store.open_cart()
            return True

        logger.warning("Ignoring unknown assistant tool %r", name)
        return False

    def dispatch_all(self, calls: list[Mapping[str, Any]]) -> int:
        """Apply ``{"name": ..., "args": {...}}`` calls in order.

        Returns how many had an effect.
        """
        applied = 0
        for call in calls:
            args = call.get("args") or {}
            if not isinstance(args, Mapping):
                logger.warning("Ignoring tool call with non-object args")
                continue
            if self.dispatch(str(call.get("name", "")), args):
                applied += 1
        return applied
