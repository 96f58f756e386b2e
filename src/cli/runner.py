# src/cli/runner.py

"""Headless CLI: list the catalog, run a scripted checkout, check health."""

import asyncio
import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.product import Product
from src.services.catalog_fetcher import ProductCatalogFetcher
from src.services.errors import FetchError
from src.storage.cart_store import CartFavoriteStore

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def parse_ids(id_csv: str) -> list[int]:
    """Turn ``"3, 7,3"`` into ``[3, 7, 3]``.

    Raises ``SystemExit`` on anything that is not an integer.
    """
    ids: list[int] = []
    for part in id_csv.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            _err.print(f"[red]Not a product id: {part!r}[/red]")
            raise SystemExit(1)
    return ids


def _products_to_dicts(
    products: list[Product],
    store: CartFavoriteStore | None = None,
) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    rows: list[dict[str, object]] = []
    for p in products:
        row: dict[str, object] = {
            "id": p.id,
            "title": p.title,
            "price": p.price,
            "description": p.description,
            "image": p.image,
            "rating": {"rate": p.rating.rate, "count": p.rating.count},
        }
        if store is not None:
            row["favorite"] = store.is_favorite(p.id)
        rows.append(row)
    return rows


def _print_table(
    products: list[Product],
    title: str = "Product Store",
    store: CartFavoriteStore | None = None,
) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", max_width=Settings.TITLE_WIDTH)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="left", style="yellow")
    table.add_column("♥", justify="center", style="red")

    for p in products:
        heart = "♥" if store is not None and store.is_favorite(p.id) else ""
        table.add_row(
            str(p.id),
            p.title,
            p.display_price,
            p.star_strip(),
            heart,
        )

    Console().print(table)


async def _fetch_catalog(url: str | None) -> list[Product] | None:
    """Fetch the catalog off the event loop, printing any error."""
    fetcher = ProductCatalogFetcher(url)
    try:
        return await asyncio.to_thread(fetcher.fetch)
    except FetchError as exc:
        logger.error("Catalog fetch failed: %s", exc)
        _err.print(f"[red]Error: {exc}[/red]")
        return None


async def cli_list(output_format: str, url: str | None = None) -> int:
    """Print the catalog and return an exit code (0=ok, 1=fail)."""
    _err.print(
        f"[bold]Fetching catalog:[/bold] {url or Settings.CATALOG_URL}"
    )
    products = await _fetch_catalog(url)
    if products is None:
        return 1
    if products:
        _err.print(f"[green]✓ {len(products)} products[/green]")
    else:
        _err.print("[yellow]Catalog is empty.[/yellow]")
    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            _products_to_dicts(products),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_checkout(
    id_csv: str,
    output_format: str,
    url: str | None = None,
) -> int:
    """Add the given product ids to a fresh cart and check out."""
    ids = parse_ids(id_csv)
    products = await _fetch_catalog(url)
    if products is None:
        return 1

    store = CartFavoriteStore(products)
    known = {p.id for p in products}
    for product_id in ids:
        if product_id not in known:
            _err.print(
                f"[yellow]Skipping unknown product id {product_id}[/yellow]"
            )
        store.add_to_cart_and_favorite(product_id)

    if store.cart_count() == 0:
        _err.print(f"[yellow]{Settings.EMPTY_CART_MESSAGE}[/yellow]")
        return 1

    receipt = store.checkout()
    if output_format == "table":
        _print_table(store.cart_contents(), title="Your Cart", store=store)
        Console().print(
            f"[bold green]{receipt.title}[/bold green]: {receipt.message} "
            f"({receipt.item_count} items, "
            f"{Settings.CURRENCY_SYMBOL}{receipt.total:.2f})"
        )
    else:
        json.dump(
            {
                "items": _products_to_dicts(store.cart_contents(), store),
                "item_count": receipt.item_count,
                "total": round(receipt.total, 2),
                "message": receipt.message,
            },
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def run_health_check(url: str | None = None) -> int:
    """Probe the catalog endpoint (or *url*) and print a status table."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running catalog health check...[/bold]")
    r = await HealthChecker(url).check()

    table = Table(
        title="Catalog Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    if r.status == "ok":
        status = "[green]✅ OK[/green]"
    elif r.status == "slow":
        status = "[yellow]⚠️  SLOW[/yellow]"
    else:
        status = "[red]❌ DOWN[/red]"
    latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "-"
    table.add_row(r.endpoint, status, latency, r.message)

    Console().print(table)
    return 1 if r.status == "down" else 0
