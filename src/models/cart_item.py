# src/models/cart_item.py

"""Cart line model."""

from dataclasses import dataclass

from src.models.product import Product


@dataclass
class CartItem:
    """A product selected for purchase and how many of it."""

    product: Product
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity
