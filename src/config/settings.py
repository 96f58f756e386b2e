# src/config/settings.py

"""Central configuration for the storefront client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront client."""

    # --- Catalog API ---
    CATALOG_URL: str = os.getenv(
        "STOREFRONT_CATALOG_URL",
        "https://fakestoreapi.com/products",
    )
    REQUEST_TIMEOUT: int = int(
        os.getenv("STOREFRONT_REQUEST_TIMEOUT", "15")
    )                                   # Seconds before a request times out

    # --- Health ---
    HEALTH_SLOW_MS: float = 5000.0      # Latency above this is "slow"

    # --- HTTP client ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Display ---
    CURRENCY_SYMBOL: str = "$"
    MAX_STARS: int = 5
    TITLE_WIDTH: int = 48

    # --- Checkout ---
    CHECKOUT_TITLE: str = "Thank You"
    CHECKOUT_MESSAGE: str = "Your order has been placed successfully!"
    EMPTY_CART_MESSAGE: str = "Your Cart is Empty!"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
