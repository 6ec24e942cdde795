# pricescout/extractors/amazon_extractor.py

"""Extractor for amazon.in search results."""

from bs4 import Tag

from pricescout.extractors.base_extractor import SiteExtractor
from pricescout.models.product import ProductRecord


class AmazonExtractor(SiteExtractor):
    """Extractor for amazon.in search results."""

    PLATFORM_ID = "amazon"
    PLATFORM_LABEL = "Amazon"
    ORIGIN = "https://www.amazon.in"
    FALLBACK_RATING = 4.0
    FALLBACK_REVIEWS = 100

    def build_search_url(self, query: str) -> str:
        """Return the Amazon.in search URL."""
        return f"{self.ORIGIN}/s?k={self.encode_query(query)}"

    def _parse_card(self, card: Tag) -> ProductRecord | None:
        """Parse a single search-result card."""
        name = self.field_text(card, "name")
        price = self.clean_price(self.field_text(card, "price"))
        if not name or not price:
            return None
        return self.make_record(
            card,
            name=name,
            price=price,
            rating=self.parse_rating(self.field_text(card, "rating")),
            reviews=self.parse_count(self.field_text(card, "reviews")),
        )
