# pricescout/extractors/ajio_extractor.py

"""Extractor for ajio.com search results."""

from bs4 import Tag

from pricescout.extractors.base_extractor import SiteExtractor
from pricescout.models.product import ProductRecord


class AjioExtractor(SiteExtractor):
    """Extractor for ajio.com search results."""

    PLATFORM_ID = "ajio"
    PLATFORM_LABEL = "Ajio"
    ORIGIN = "https://www.ajio.com"

    def build_search_url(self, query: str) -> str:
        return f"{self.ORIGIN}/search/?text={self.encode_query(query)}"

    def _parse_card(self, card: Tag) -> ProductRecord | None:
        brand = self.field_text(card, "brand")
        price_text = self.field_text(card, "price")
        # Ajio prices carry no decimals; keep the digits only
        price = "".join(ch for ch in price_text if ch.isdigit())
        if not brand or not price:
            return None
        title = self.field_text(card, "name")
        return self.make_record(
            card,
            name=f"{brand} {title}".strip(),
            price=price,
        )
