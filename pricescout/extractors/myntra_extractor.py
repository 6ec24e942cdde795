# pricescout/extractors/myntra_extractor.py

"""Extractor for myntra.com search results."""

from bs4 import Tag

from pricescout.extractors.base_extractor import SiteExtractor
from pricescout.models.product import ProductRecord


class MyntraExtractor(SiteExtractor):
    """Extractor for myntra.com search results.

    Myntra splits brand and product title into separate elements, and
    most listing cards carry no rating, so the base class fills one in.
    """

    PLATFORM_ID = "myntra"
    PLATFORM_LABEL = "Myntra"
    ORIGIN = "https://www.myntra.com"

    def build_search_url(self, query: str) -> str:
        """Myntra serves search results at ``/<query>``."""
        return f"{self.ORIGIN}/{self.encode_query(query)}"

    def _parse_card(self, card: Tag) -> ProductRecord | None:
        brand = self.field_text(card, "brand")
        price = self.clean_price(self.field_text(card, "price"))
        if not brand or not price:
            return None
        title = self.field_text(card, "name")
        name = f"{brand} {title}".strip()
        return self.make_record(
            card,
            name=name,
            price=price,
            rating=self.parse_rating(self.field_text(card, "rating")),
            reviews=self.parse_count(self.field_text(card, "reviews")),
        )
