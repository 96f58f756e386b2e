# src/models/cart_snapshot.py

"""Immutable views of cart and favorite state handed to the UI."""

from dataclasses import dataclass

from src.models.product import Product


@dataclass(frozen=True)
class MembershipState:
    """Favorite and cart flags for one product id.

    The store keeps both flags equal, so only the all-false (neutral)
    and all-true (active) combinations are ever produced.
    """

    is_favorite: bool = False
    in_cart: bool = False


@dataclass(frozen=True)
class CartSnapshot:
    """Cart contents at the moment a store command completed."""

    items: tuple[Product, ...] = ()

    @property
    def count(self) -> int:
        """Number of products in the cart."""
        return len(self.items)

    @property
    def total(self) -> float:
        """Sum of the prices of every product in the cart."""
        return sum(p.price for p in self.items)

    @property
    def product_ids(self) -> tuple[int, ...]:
        """Ids in cart order."""
        return tuple(p.id for p in self.items)


@dataclass(frozen=True)
class CheckoutReceipt:
    """Outcome of a mock checkout."""

    item_count: int
    total: float
    title: str
    message: str
