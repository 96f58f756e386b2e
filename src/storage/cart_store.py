# src/storage/cart_store.py

"""In-memory favorite and cart state shared by every screen."""

import logging
from collections.abc import Callable, Iterable

from src.config.settings import Settings
from src.models.cart_snapshot import (
    CartSnapshot,
    CheckoutReceipt,
    MembershipState,
)
from src.models.product import Product

logger = logging.getLogger("storefront.cart")

CartObserver = Callable[[CartSnapshot], None]


class CartFavoriteStore:
    """Single source of truth for favorite and cart membership.

    A product is a favorite exactly when it is in the cart. Rather than
    tracking two flags and keeping them in step, the store keeps one
    insertion-ordered ``dict`` of carted products and derives both flags
    from membership in it, so a product can only ever be neutral (not
    favorite, not in cart) or active (favorite and in cart).

    Adding requires the id of a product registered through
    :meth:`load_catalog`; unknown ids are ignored. Every command that is
    not ignored ends by pushing a :class:`CartSnapshot` to the subscribed
    observers.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._catalog: dict[int, Product] = {}
        self._cart: dict[int, Product] = {}
        self._observers: list[CartObserver] = []
        self.load_catalog(products)

    # ── Catalog ──────────────────────────────────────────

    def load_catalog(self, products: Iterable[Product]) -> None:
        """Register the products commands may refer to.

        Replaces the previous catalog. Cart entries keep their position;
        those whose id is still present pick up the fresh Product.
        """
        self._catalog = {p.id: p for p in products}
        for product_id in self._cart:
            fresh = self._catalog.get(product_id)
            if fresh is not None:
                self._cart[product_id] = fresh
        logger.debug(
            "Catalog loaded with %d products (%d in cart)",
            len(self._catalog),
            len(self._cart),
        )

    # ── Commands ─────────────────────────────────────────

    def toggle_favorite(self, product_id: int) -> None:
        """Flip the favorite flag and move the product in or out of the cart."""
        if product_id in self._cart:
            del self._cart[product_id]
            logger.info("Unfavorited product %d, removed from cart", product_id)
        else:
            product = self._resolve(product_id, "toggle_favorite")
            if product is None:
                return
            self._cart[product_id] = product
            logger.info("Favorited product %d, added to cart", product_id)
        self._notify()

    def add_to_cart_and_favorite(self, product_id: int) -> None:
        """Put the product in the cart and mark it favorite.

        Adding a product that is already in the cart leaves its position
        and the cart size unchanged.
        """
        product = self._resolve(product_id, "add_to_cart_and_favorite")
        if product is None:
            return
        if product_id not in self._cart:
            self._cart[product_id] = product
            logger.info("Added product %d to cart", product_id)
        else:
            logger.debug("Product %d already in cart", product_id)
        self._notify()

    def remove_from_cart(self, product_id: int) -> None:
        """Take the product out of the cart and clear its favorite flag."""
        if self._cart.pop(product_id, None) is None:
            logger.debug("Product %r not in cart, nothing to remove", product_id)
        else:
            logger.info("Removed product %d from cart", product_id)
        self._notify()

    def checkout(self) -> CheckoutReceipt:
        """Mock checkout: summarise the cart without charging or clearing it."""
        snapshot = self.snapshot()
        logger.info(
            "Checkout placed for %d items totalling %.2f",
            snapshot.count,
            snapshot.total,
        )
        return CheckoutReceipt(
            item_count=snapshot.count,
            total=snapshot.total,
            title=Settings.CHECKOUT_TITLE,
            message=Settings.CHECKOUT_MESSAGE,
        )

    # ── Reads ────────────────────────────────────────────

    def is_favorite(self, product_id: int) -> bool:
        """Return True when the product is marked favorite."""
        return product_id in self._cart

    def is_in_cart(self, product_id: int) -> bool:
        """Return True when the product is in the cart."""
        return product_id in self._cart

    def membership(self, product_id: int) -> MembershipState:
        """Both flags for one product id."""
        active = product_id in self._cart
        return MembershipState(is_favorite=active, in_cart=active)

    def cart_contents(self) -> list[Product]:
        """Products in the cart, in the order they were added."""
        return list(self._cart.values())

    def cart_count(self) -> int:
        """Number of products in the cart."""
        return len(self._cart)

    def cart_total(self) -> float:
        """Sum of the prices of the products in the cart."""
        return sum(p.price for p in self._cart.values())

    def snapshot(self) -> CartSnapshot:
        """Immutable copy of the current cart."""
        return CartSnapshot(items=tuple(self._cart.values()))

    # ── Observers ────────────────────────────────────────

    def subscribe(self, observer: CartObserver) -> Callable[[], None]:
        """Call *observer* with a snapshot after every command.

        Returns a function that removes the subscription.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # ── Private helpers ──────────────────────────────────

    def _resolve(self, product_id: int, command: str) -> Product | None:
        """Look up a catalog product, logging ids the catalog doesn't know."""
        product = self._catalog.get(product_id)
        if product is None:
            logger.debug(
                "%s ignored for unknown product id %r",
                command,
                product_id,
            )
        return product

    def _notify(self) -> None:
        """Push the current snapshot to every observer."""
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.error(
                    "Cart observer %r failed", observer, exc_info=True
                )
