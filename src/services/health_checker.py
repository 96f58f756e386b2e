# src/services/health_checker.py

"""Catalog endpoint connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.services.catalog_fetcher import validate_url
from src.services.errors import InvalidEndpoint

logger = logging.getLogger("storefront.health")

_HEALTH_TIMEOUT = 10  # seconds per probe


@dataclass
class HealthResult:
    """Outcome of probing the catalog endpoint."""

    endpoint: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_endpoint(url: str) -> HealthResult:
    """Issue one GET against *url* and classify the outcome."""
    try:
        validate_url(url)
    except InvalidEndpoint as exc:
        return HealthResult(url, "down", 0.0, str(exc))

    start = time.monotonic()
    try:
        session = curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )
        try:
            resp = session.get(
                url,
                headers=Settings.DEFAULT_HEADERS,
                timeout=_HEALTH_TIMEOUT,
                verify=True,
            )
        finally:
            session.close()
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(url, "down", elapsed_ms, str(exc)[:80])

    elapsed_ms = (time.monotonic() - start) * 1000
    if resp.status_code != 200:
        return HealthResult(
            url, "down", elapsed_ms, f"HTTP {resp.status_code}"
        )
    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(url, "slow", elapsed_ms, "High latency")
    return HealthResult(url, "ok", elapsed_ms, "")


class HealthChecker:
    """Probes one catalog endpoint off the event loop."""

    def __init__(self, url: str | None = None) -> None:
        self.url = url or Settings.CATALOG_URL

    async def check(self) -> HealthResult:
        """Probe the endpoint in a worker thread and log the outcome."""
        result = await asyncio.to_thread(probe_endpoint, self.url)
        logger.info(
            "Health check %s: %s (%.0fms) %s",
            result.endpoint,
            result.status,
            result.latency_ms,
            result.message,
        )
        return result
