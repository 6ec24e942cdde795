# pricescout/extractors/flipkart_extractor.py

"""Extractor for flipkart.com search results."""

import re

from bs4 import Tag

from pricescout.extractors.base_extractor import SiteExtractor
from pricescout.models.product import ProductRecord

_RUPEE_PRICE_RE = re.compile(r"₹\s?([\d,]+)")


class FlipkartExtractor(SiteExtractor):
    """Extractor for flipkart.com search results."""

    PLATFORM_ID = "flipkart"
    PLATFORM_LABEL = "Flipkart"
    ORIGIN = "https://www.flipkart.com"
    FALLBACK_RATING = 4.0
    FALLBACK_REVIEWS = 100

    def build_search_url(self, query: str) -> str:
        """Return the Flipkart search URL."""
        return f"{self.ORIGIN}/search?q={self.encode_query(query)}"

    def _parse_card(self, card: Tag) -> ProductRecord | None:
        """Parse a grid or list card, skipping help widgets."""
        name = self.field_text(card, "name")
        if not name or "need help" in name.lower():
            return None

        match = _RUPEE_PRICE_RE.search(self.field_text(card, "price"))
        if not match:
            return None
        price = match.group(1).replace(",", "")

        # Zero reviews on a listing means the count was not rendered
        reviews = self.parse_count(self.field_text(card, "reviews"))
        return self.make_record(
            card,
            name=name,
            price=price,
            rating=self.parse_rating(self.field_text(card, "rating")),
            reviews=reviews or None,
        )
