# pricescout/extractors/jiomart_extractor.py

"""Extractor for jiomart.com search results."""

import re

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Page

from pricescout.extractors.base_extractor import SiteExtractor, absolute_url
from pricescout.models.product import ProductRecord

_RUPEE_PRICE_RE = re.compile(r"₹\s?([0-9][0-9,.]*)")


class JioMartExtractor(SiteExtractor):
    """Extractor for jiomart.com search results.

    JioMart pages are heavier than the other platforms: longer timeout
    and settle delay, a scroll to trigger lazy-loaded tiles, and an
    alternate ``catalogsearch`` URL when the primary search page fails
    to load.  Cards often lack recognisable classes, so the name and
    price both fall back to scanning the card's text, and ratings are
    never shown on listings.
    """

    PLATFORM_ID = "jiomart"
    PLATFORM_LABEL = "JioMart"
    ORIGIN = "https://www.jiomart.com"
    NAVIGATION_TIMEOUT_MS = 45_000
    SETTLE_DELAY_MS = 4_000
    SCROLL_DELAY_MS = 2_000
    SCROLL_PIXELS = 500
    MAX_RESULTS = 8
    SYNTHETIC_REVIEWS = (50, 500)

    def build_search_url(self, query: str) -> str:
        return f"{self.ORIGIN}/search/{self.encode_query(query)}"

    def build_fallback_url(self, query: str) -> str | None:
        return (
            f"{self.ORIGIN}/catalogsearch/result"
            f"?q={self.encode_query(query)}"
        )

    async def _stabilize(self, page: Page) -> None:
        """Scroll once so lazy tiles render, then settle again."""
        self.logger.debug("JioMart page title: %s", await page.title())
        await page.evaluate(
            f"() => window.scrollBy(0, {self.SCROLL_PIXELS})"
        )
        await page.wait_for_timeout(self.SCROLL_DELAY_MS)

    def _fallback_cards(self, soup: BeautifulSoup) -> list[Tag]:
        """Innermost divs that hold a rupee price, an image and a link."""
        self.logger.debug(
            "No JioMart card selector matched, scanning for price blocks"
        )
        candidates = [
            div
            for div in soup.find_all("div")
            if "₹" in div.get_text()
            and div.find("img") is not None
            and div.find("a") is not None
        ]
        candidate_ids = {id(div) for div in candidates}
        return [
            div
            for div in candidates
            if not any(
                id(inner) in candidate_ids
                for inner in div.find_all("div")
            )
        ]

    def _card_name(self, card: Tag) -> str:
        """Named element first, else the longest price-free text."""
        name = self.field_text(card, "name")
        if name:
            return name
        texts = [
            text.strip()
            for text in card.find_all(string=True)
            if text.strip()
            and "₹" not in text
            and len(text.strip()) > 5
        ]
        return max(texts, key=len) if texts else ""

    def _card_price(self, card: Tag) -> str:
        price = self.clean_price(self.field_text(card, "price"))
        if price:
            return price
        match = _RUPEE_PRICE_RE.search(card.get_text(" "))
        return self.clean_price(match.group(1)) if match else ""

    def _parse_card(self, card: Tag) -> ProductRecord | None:
        name = self._card_name(card)
        if not name:
            self.logger.debug("JioMart card without a name, skipping")
            return None
        price = self._card_price(card)
        if not price:
            self.logger.debug("JioMart card '%s' without a price", name)
            return None
        return self.make_record(card, name=name, price=price)

    def _product_url(self, card: Tag, name: str) -> str:
        """Product page link, or a name search when there is none.

        Links that do not point at a ``/p/`` product page usually lead
        to the homepage or a category, which is useless to the caller.
        """
        url = absolute_url(self._link_href(card), self.ORIGIN)
        if url and "/p/" in url:
            return url
        return f"{self.ORIGIN}/search/{self.encode_query(name)}"
