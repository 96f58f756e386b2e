# src/ui/app.py

"""Terminal UI for browsing the catalog, keeping favorites and checking out."""

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widget import Widget
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Static,
)

from src.config.settings import Settings
from src.models.cart_snapshot import CartSnapshot
from src.models.product import Product
from src.services.catalog_fetcher import ProductCatalogFetcher
from src.services.errors import FetchError
from src.services.image_fetcher import ImageFetcher
from src.storage.cart_store import CartFavoriteStore

logger = logging.getLogger("storefront.ui")

WidgetT = TypeVar("WidgetT", bound=Widget)

_HEART_ON = "♥"
_HEART_OFF = "♡"


def _heart(active: bool) -> Text:
    """Heart cell for a product row."""
    if active:
        return Text(_HEART_ON, style="bold red")
    return Text(_HEART_OFF, style="red")


class ProductPreviewScreen(Screen[None]):
    """Full details for one product with an "Add to Cart" action."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("a", "add_to_cart", "Add to Cart"),
    ]

    def __init__(
        self,
        product: Product,
        store: CartFavoriteStore,
        image_fetcher: ImageFetcher,
    ) -> None:
        super().__init__()
        self.product = product
        self.store = store
        self.image_fetcher = image_fetcher
        self.image_bytes: bytes | None = None

    def compose(self) -> ComposeResult:
        """Build the preview layout."""
        p = self.product
        yield Header()
        yield VerticalScroll(
            Static("Loading image…", id="preview_image"),
            Static(Text(p.title, style="bold"), id="preview_title"),
            Static(Text(p.star_strip(), style="yellow"), id="preview_rating"),
            Static(Text(p.display_price, style="bold blue"), id="preview_price"),
            Static(p.description, id="preview_description"),
            Horizontal(
                Button("Add to Cart", variant="success", id="add_to_cart_btn"),
                Button("Close", variant="error", id="close_btn"),
                id="preview_actions",
            ),
            id="preview_body",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Start the image download in the background."""
        self.run_worker(self.load_image(), exclusive=True)

    async def load_image(self) -> None:
        """Fetch the product image; on failure keep the placeholder."""
        data = await asyncio.to_thread(
            self.image_fetcher.load, self.product.image
        )
        if data is None:
            return
        self.image_bytes = data
        self.query_one("#preview_image", Static).update(
            f"🖼  Image loaded ({len(data) / 1024:.1f} KB)"
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle the preview buttons."""
        if event.button.id == "add_to_cart_btn":
            self.action_add_to_cart()
        elif event.button.id == "close_btn":
            self.action_close()

    def action_add_to_cart(self) -> None:
        """Add to cart, mark favorite and return to the catalog."""
        self.store.add_to_cart_and_favorite(self.product.id)
        self.app.notify(f"Added to cart: {self.product.title[:40]}")
        self.dismiss()

    def action_close(self) -> None:
        """Return to the catalog without changing anything."""
        self.dismiss()


class CartScreen(Screen[None]):
    """Cart contents with remove and mock checkout."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("d", "remove_selected", "Remove"),
        Binding("o", "checkout", "Check Out"),
    ]

    def __init__(self, store: CartFavoriteStore) -> None:
        super().__init__()
        self.store = store
        self.snapshot: CartSnapshot = store.snapshot()
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        """Build the cart layout."""
        yield Header()
        yield Container(
            Static("Your Cart", id="cart_title"),
            Static(Settings.EMPTY_CART_MESSAGE, id="cart_empty"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="cart_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("", id="cart_total"),
            Horizontal(
                Button("Remove", variant="warning", id="remove_btn"),
                Button("Check Out", variant="primary", id="checkout_btn"),
                Button("Back", id="back_btn"),
                id="cart_actions",
            ),
            id="cart_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure columns and draw the current cart."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#cart_table", DataTable),
        )
        table.add_columns("Title", "Price")
        self._unsubscribe = self.store.subscribe(self.render_cart)
        self.render_cart(self.store.snapshot())

    def on_unmount(self) -> None:
        """Stop listening to the store once the screen is gone."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def render_cart(self, snapshot: CartSnapshot) -> None:
        """Redraw the cart table from a store snapshot."""
        self.snapshot = snapshot
        table = cast(
            DataTable[str | Text],
            self.query_one("#cart_table", DataTable),
        )
        table.clear()
        for p in snapshot.items:
            table.add_row(
                p.title[: Settings.TITLE_WIDTH],
                f"Price: {p.display_price}",
                key=str(p.id),
            )

        empty = snapshot.count == 0
        self.query_one("#cart_empty", Static).display = empty
        table.display = not empty
        self.query_one("#cart_actions", Horizontal).display = not empty
        self.query_one("#cart_total", Static).update(
            ""
            if empty
            else f"{snapshot.count} items · Total "
            f"{Settings.CURRENCY_SYMBOL}{snapshot.total:.2f}"
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle the cart buttons."""
        if event.button.id == "remove_btn":
            self.action_remove_selected()
        elif event.button.id == "checkout_btn":
            self.action_checkout()
        elif event.button.id == "back_btn":
            self.action_back()

    def action_remove_selected(self) -> None:
        """Remove the highlighted product (also clears its favorite)."""
        if not self.snapshot.items:
            self.app.notify("Cart is empty", severity="warning")
            return
        table = cast(
            DataTable[str | Text],
            self.query_one("#cart_table", DataTable),
        )
        row = min(table.cursor_row, len(self.snapshot.items) - 1)
        product = self.snapshot.items[max(row, 0)]
        self.store.remove_from_cart(product.id)

    def action_checkout(self) -> None:
        """Place the mock order."""
        if self.store.cart_count() == 0:
            self.app.notify(
                Settings.EMPTY_CART_MESSAGE, severity="warning"
            )
            return
        receipt = self.store.checkout()
        self.app.notify(receipt.message, title=receipt.title)

    def action_back(self) -> None:
        """Return to the catalog."""
        self.dismiss()


class StorefrontApp(App[object]):
    """Terminal UI for the storefront client."""

    CSS_PATH = "styles.css"
    TITLE = "Product Store"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("c", "show_cart", "Cart"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(
        self,
        catalog_url: str | None = None,
        store: CartFavoriteStore | None = None,
        fetcher: ProductCatalogFetcher | None = None,
        image_fetcher: ImageFetcher | None = None,
    ) -> None:
        super().__init__()
        self.products: list[Product] = []
        self.error_message: str = ""
        self.settings = Settings()
        self.store = store if store is not None else CartFavoriteStore()
        self.fetcher = (
            fetcher
            if fetcher is not None
            else ProductCatalogFetcher(catalog_url)
        )
        self.image_fetcher = (
            image_fetcher if image_fetcher is not None else ImageFetcher()
        )

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Horizontal(
                Static("🛒 Product Store", id="title"),
                Static("", id="cart_badge"),
                id="top_bar",
            ),
            Static("Loading Products...", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="products_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def catalog_widget(
        self, selector: str, expect_type: type[WidgetT]
    ) -> WidgetT:
        """Query the catalog screen even while another screen is on top."""
        return self.screen_stack[0].query_one(selector, expect_type)

    def catalog_table(self) -> DataTable[str | Text]:
        """The catalog's product table."""
        return cast(
            DataTable[str | Text],
            self.catalog_widget("#products_table", DataTable),
        )

    def on_mount(self) -> None:
        """Configure the product table and start the catalog fetch."""
        table = self.catalog_table()
        table.add_column(_HEART_ON, key="favorite")
        table.add_column("Title", key="title")
        table.add_column("Price", key="price")
        table.add_column("Rating", key="rating")
        self.store.subscribe(self.on_cart_changed)
        self.update_badge(self.store.cart_count())
        self.run_worker(self.load_catalog(), exclusive=True, group="catalog")

    async def load_catalog(self) -> None:
        """Fetch the catalog off the event loop and render it."""
        status = self.catalog_widget("#status", Static)
        status.update("Loading Products...")
        try:
            products = await asyncio.to_thread(self.fetcher.fetch)
        except FetchError as exc:
            self.show_error(str(exc))
            return
        except Exception as exc:
            logger.error("Unexpected catalog failure", exc_info=True)
            self.show_error(str(exc))
            return

        self.error_message = ""
        self.products = products
        self.store.load_catalog(products)
        self.populate_table()
        if products:
            status.update(f"{len(products)} products")
        else:
            status.update("No products available")

    def show_error(self, message: str) -> None:
        """Surface a fetch failure without leaving the app."""
        self.error_message = message
        logger.error("Catalog unavailable: %s", message)
        self.catalog_widget("#status", Static).update(
            Text(f"Error: {message}", style="bold red")
        )
        self.notify(f"Error: {message}", severity="error")

    def populate_table(self) -> None:
        """Fill the DataTable with the catalog and current favorites."""
        table = self.catalog_table()
        table.clear()
        for p in self.products:
            table.add_row(
                _heart(self.store.is_favorite(p.id)),
                p.title[: self.settings.TITLE_WIDTH],
                Text(p.display_price, style="blue"),
                Text(p.star_strip(), style="yellow"),
                key=str(p.id),
            )

    def on_cart_changed(self, snapshot: CartSnapshot) -> None:
        """Store observer: refresh hearts and the cart badge."""
        self.update_badge(snapshot.count)
        if not self.products:
            return
        table = self.catalog_table()
        in_cart = set(snapshot.product_ids)
        for p in self.products:
            table.update_cell(
                str(p.id), "favorite", _heart(p.id in in_cart)
            )

    def update_badge(self, count: int) -> None:
        """Show the cart count next to the title."""
        badge = self.catalog_widget("#cart_badge", Static)
        badge.update(f"🛒 {count}" if count > 0 else "🛒")
        self.sub_title = f"Cart: {count}"

    def selected_product(self) -> Product | None:
        """Product under the catalog cursor, if any."""
        if not self.products:
            return None
        table = self.catalog_table()
        row = table.cursor_row
        if 0 <= row < len(self.products):
            return self.products[row]
        return None

    def _on_catalog_screen(self) -> bool:
        """True when no preview or cart screen is on top."""
        return len(self.screen_stack) == 1

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the preview for the selected catalog row."""
        if event.data_table.id != "products_table":
            return
        if 0 <= event.cursor_row < len(self.products):
            self.open_preview(self.products[event.cursor_row])

    def open_preview(self, product: Product) -> None:
        """Push the preview screen for *product*."""
        self.push_screen(
            ProductPreviewScreen(product, self.store, self.image_fetcher)
        )

    def action_toggle_favorite(self) -> None:
        """Toggle the heart (and cart membership) of the selected product."""
        if not self._on_catalog_screen():
            return
        product = self.selected_product()
        if product is None:
            self.notify("No product selected", severity="warning")
            return
        self.store.toggle_favorite(product.id)

    def action_show_cart(self) -> None:
        """Open the cart screen."""
        if not self._on_catalog_screen():
            return
        self.push_screen(CartScreen(self.store))

    def action_reload(self) -> None:
        """Re-fetch the catalog on demand."""
        if not self._on_catalog_screen():
            return
        self.run_worker(self.load_catalog(), exclusive=True, group="catalog")
