# src/services/catalog_fetcher.py

"""Fetch and decode the product catalog from the remote JSON API."""

import json
import logging
from typing import Any
from urllib.parse import urlparse

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.product import Product, Rating
from src.services.errors import (
    DecodeError,
    EmptyResponse,
    InvalidEndpoint,
    TransportError,
)

logger = logging.getLogger("storefront.catalog")

_MAX_RATE = float(Settings.MAX_STARS)


def validate_url(url: str) -> str:
    """Return *url* unchanged, or raise InvalidEndpoint if it is unusable."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidEndpoint(f"Invalid URL: {url!r}")
    return url


def parse_product(record: dict[str, Any]) -> Product:
    """Build a Product from one API record.

    Unknown keys are ignored. Raises ``KeyError``, ``TypeError`` or
    ``ValueError`` when a required field is missing or has the wrong type.
    """
    rating_raw = record.get("rating") or {}
    if not isinstance(rating_raw, dict):
        raise TypeError("rating must be an object")
    product_id = record["id"]
    if isinstance(product_id, bool) or not isinstance(product_id, int):
        raise TypeError(f"id must be an integer, got {product_id!r}")
    title = record["title"]
    if not isinstance(title, str):
        raise TypeError(f"title must be a string, got {title!r}")

    rate = float(rating_raw.get("rate", 0.0))
    count = int(rating_raw.get("count", 0))
    if not 0.0 <= rate <= _MAX_RATE:
        raise ValueError(f"rating rate out of range: {rate}")
    if count < 0:
        raise ValueError(f"rating count is negative: {count}")

    return Product(
        id=product_id,
        title=title,
        price=float(record["price"]),
        description=str(record.get("description", "")),
        image=str(record.get("image", "")),
        rating=Rating(rate=rate, count=count),
        category=str(record.get("category", "")),
    )


def parse_catalog(body: str) -> list[Product]:
    """Decode a catalog response body into products.

    The body must be a JSON array. Records that fail to decode are
    skipped so one bad entry does not hide the rest of the catalog. Ids
    are unique: a later record reusing an id is skipped, the first wins.
    """
    try:
        payload: Any = json.loads(body)
    except json.JSONDecodeError as exc:
        raise DecodeError(
            f"Response is not valid JSON: {exc.msg}"
        ) from exc
    if not isinstance(payload, list):
        raise DecodeError(
            f"Expected a JSON array, got {type(payload).__name__}"
        )

    products: list[Product] = []
    seen_ids: set[int] = set()
    skipped = 0
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            logger.warning(
                "Skipping catalog record %d: not an object", index
            )
            skipped += 1
            continue
        try:
            product = parse_product(record)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Skipping catalog record %d: %s", index, exc
            )
            skipped += 1
            continue
        if product.id in seen_ids:
            logger.warning(
                "Skipping catalog record %d: duplicate id %d",
                index,
                product.id,
            )
            skipped += 1
            continue
        seen_ids.add(product.id)
        products.append(product)

    if skipped:
        logger.info(
            "Catalog decode kept %d products, skipped %d",
            len(products),
            skipped,
        )
    return products


class ProductCatalogFetcher:
    """One-shot catalog download. No retries; callers decide when to re-fetch."""

    def __init__(self, url: str | None = None) -> None:
        self.settings = Settings()
        self.url = url if url is not None else self.settings.CATALOG_URL
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def fetch(self) -> list[Product]:
        """Download and decode the catalog.

        Raises:
            InvalidEndpoint: the configured URL is malformed.
            TransportError: network failure or non-200 status.
            EmptyResponse: the server sent no body.
            DecodeError: the body is not a JSON array.
        """
        url = validate_url(self.url)
        logger.info("Fetching catalog from %s", url)
        try:
            resp = self.session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
                verify=True,
            )
        except Exception as exc:
            logger.error(
                "Catalog request failed: %s", exc, exc_info=True
            )
            raise TransportError(str(exc)) from exc

        if resp.status_code != 200:
            logger.warning(
                "Catalog request returned HTTP %d", resp.status_code
            )
            raise TransportError(
                f"Server returned HTTP {resp.status_code}"
            )

        body = resp.text
        if not body or not body.strip():
            raise EmptyResponse("No data received")

        products = parse_catalog(body)
        logger.info("Fetched %d products", len(products))
        return products
