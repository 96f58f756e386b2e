# src/services/image_fetcher.py

"""Download product images, caching the bytes per URL for the session."""

import logging

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.services.catalog_fetcher import validate_url
from src.services.errors import EmptyResponse, FetchError, TransportError

logger = logging.getLogger("storefront.images")


class ImageFetcher:
    """Fetch image bytes by URL.

    Successful downloads are kept in memory keyed by URL so that opening
    the same product twice does not hit the network again. Failures are
    never cached.
    """

    def __init__(self) -> None:
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT
        self._cache: dict[str, bytes] = {}

    def fetch(self, url: str) -> bytes:
        """Return the image bytes at *url*, raising FetchError on failure."""
        cached = self._cache.get(url)
        if cached is not None:
            logger.debug("Image cache hit for %s", url)
            return cached

        validate_url(url)
        try:
            resp = self.session.get(
                url,
                timeout=self._request_timeout,
                verify=True,
            )
        except Exception as exc:
            raise TransportError(str(exc)) from exc

        if resp.status_code != 200:
            raise TransportError(
                f"Server returned HTTP {resp.status_code}"
            )
        data: bytes = resp.content
        if not data:
            raise EmptyResponse("No data received")

        self._cache[url] = data
        logger.debug("Fetched %d bytes from %s", len(data), url)
        return data

    def load(self, url: str) -> bytes | None:
        """Like :meth:`fetch` but returns None instead of raising."""
        try:
            return self.fetch(url)
        except FetchError as exc:
            logger.debug("Image load failed for %s: %s", url, exc)
            return None

    def clear(self) -> int:
        """Drop every cached image. Returns how many were removed."""
        count = len(self._cache)
        self._cache.clear()
        logger.info("Image cache purged (%d entries removed)", count)
        return count
