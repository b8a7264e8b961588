# tests/test_product_filter.py

"""Tests for the search and category projection."""

import unittest

from src.data.fallback_catalog import fallback_products
from src.filters.product_filter import ProductFilter
from src.models.product import Product


def _make_product(
    pid: int, name: str, category: str, description: str = "",
) -> Product:
    """Create a minimal Product for filtering."""
    return Product(
        id=pid,
        name=name,
        price=10.0,
        category=category,
        description=description,
    )


class TestProject(unittest.TestCase):
    """ProductFilter.project behaviour."""

    def setUp(self) -> None:
        self.products = [
            _make_product(1, "Thuluth Study", "Thuluth", "tall letters"),
            _make_product(2, "Naskh Page", "Naskh", "a clear book hand"),
            _make_product(3, "Second Thuluth", "Thuluth", "gold leaf"),
        ]

    def test_no_filters_returns_everything_in_order(self) -> None:
        kept = ProductFilter.project(self.products, "", "All")
        self.assertEqual([p.id for p in kept], [1, 2, 3])

    def test_category_filter(self) -> None:
        kept = ProductFilter.project(self.products, "", "Thuluth")
        self.assertEqual([p.id for p in kept], [1, 3])

    def test_query_matches_name_case_insensitively(self) -> None:
        kept = ProductFilter.project(self.products, "NASKH", "All")
        self.assertEqual([p.id for p in kept], [2])

    def test_query_matches_description(self) -> None:
        kept = ProductFilter.project(self.products, "gold", "All")
        self.assertEqual([p.id for p in kept], [3])

    def test_query_and_category_combine(self) -> None:
        kept = ProductFilter.project(self.products, "study", "Naskh")
        self.assertEqual(kept, [])

    def test_unknown_category_is_empty_not_error(self) -> None:
        self.assertEqual(
            ProductFilter.project(self.products, "", "Diwani"), []
        )

    def test_input_is_not_modified(self) -> None:
        """Projecting twice gives the same answer and leaves the input."""
        before = list(self.products)
        first = ProductFilter.project(self.products, "thuluth", "All")
        second = ProductFilter.project(self.products, "thuluth", "All")
        self.assertEqual(first, second)
        self.assertEqual(self.products, before)

    def test_kufic_search_over_fallback_catalog(self) -> None:
        """Searching 'kufic' finds exactly the Kufic piece."""
        kept = ProductFilter.project(fallback_products(), "kufic", "All")
        self.assertEqual([p.name for p in kept], ["Kufic Geometry"])


class TestCategories(unittest.TestCase):
    """ProductFilter.categories listing."""

    def test_all_first_then_first_seen_order(self) -> None:
        products = [
            _make_product(1, "a", "B"),
            _make_product(2, "b", "A"),
            _make_product(3, "c", "B"),
        ]
        self.assertEqual(
            ProductFilter.categories(products), ["All", "B", "A"]
        )

    def test_empty_catalog_has_only_all(self) -> None:
        self.assertEqual(ProductFilter.categories([]), ["All"])

    def test_blank_category_skipped(self) -> None:
        products = [_make_product(1, "a", "")]
        self.assertEqual(ProductFilter.categories(products), ["All"])


if __name__ == "__main__":
    unittest.main()
