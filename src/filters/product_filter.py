# src/filters/product_filter.py

"""Search and category projection over the catalog."""

import logging
from collections.abc import Sequence

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("umars_hands.filters")


class ProductFilter:
    """Derive the archive view from the catalog and the current filters."""

    @staticmethod
    def project(
        products: Sequence[Product],
        search_query: str,
        selected_category: str,
    ) -> list[Product]:
        """Return products matching the category and the search query.

        A product matches when the category is ``All`` or equal to its
        category, and the query is empty or a case-insensitive substring
        of its name or description.  Source order is preserved; an empty
        result is a normal outcome.
        """
        needle = search_query.lower()
        all_categories = selected_category == Settings.ALL_CATEGORIES

        kept: list[Product] = []
        for product in products:
            if not all_categories and product.category != selected_category:
                continue
            if needle and not (
                needle in product.name.lower()
                or needle in product.description.lower()
            ):
                continue
            kept.append(product)

        logger.debug(
            "Projected %d of %d products (query=%r, category=%r)",
            len(kept),
            len(products),
            search_query,
            selected_category,
        )
        return kept

    @staticmethod
    def categories(products: Sequence[Product]) -> list[str]:
        """List ``All`` followed by each category in first-seen order."""
        seen: list[str] = [Settings.ALL_CATEGORIES]
        for product in products:
            if product.category and product.category not in seen:
                seen.append(product.category)
        return seen
