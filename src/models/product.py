# src/models/product.py

"""Product data model as returned by the catalog API."""

from dataclasses import dataclass, field

from src.config.settings import Settings


@dataclass(frozen=True)
class Rating:
    """Average review score and number of reviews."""

    rate: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class Product:
    """A single catalog entry. Never mutated after decoding."""

    id: int
    title: str
    price: float
    description: str = ""
    image: str = ""
    rating: Rating = field(default_factory=Rating)
    category: str = ""

    @property
    def stars(self) -> int:
        """Rating rounded to whole stars, clamped to the star strip."""
        rounded = int(self.rating.rate + 0.5)
        return max(0, min(Settings.MAX_STARS, rounded))

    @property
    def display_price(self) -> str:
        """Price formatted for display, e.g. ``$109.95``."""
        return f"{Settings.CURRENCY_SYMBOL}{self.price:.2f}"

    def star_strip(self) -> str:
        """Filled and empty stars followed by the review count."""
        filled = "★" * self.stars
        empty = "☆" * (Settings.MAX_STARS - self.stars)
        return f"{filled}{empty} ({self.rating.count})"
