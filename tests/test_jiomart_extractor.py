# tests/test_jiomart_extractor.py

"""Tests for the JioMart extractor."""

import unittest

from pricescout.extractors.jiomart_extractor import JioMartExtractor
from tests.fake_page import FakePage, load_fixture


class TestJioMartParsing(unittest.TestCase):
    """Parsing tests for the JioMart fixtures."""

    def setUp(self) -> None:
        self.extractor = JioMartExtractor()
        self.records = self.extractor.parse_results(
            load_fixture("jiomart_search.html"), "atta"
        )

    def test_capped_at_eight(self) -> None:
        """Nine valid cards on the page, eight returned."""
        self.assertEqual(len(self.records), 8)
        self.assertEqual(
            self.records[-1].name, "Brand 9 Whole Wheat Atta 5 kg"
        )

    def test_priceless_card_skipped(self) -> None:
        self.assertNotIn(
            "Organic Tattva Whole Wheat Atta",
            [r.name for r in self.records],
        )

    def test_named_card(self) -> None:
        first = self.records[0]
        self.assertEqual(first.platform, "JioMart")
        self.assertEqual(first.name, "Aashirvaad Shudh Chakki Atta 5 kg")
        self.assertEqual(first.price, "₹245.00")
        self.assertEqual(
            first.url,
            "https://www.jiomart.com/p/groceries/"
            "aashirvaad-shudh-chakki-atta-5-kg/490000363",
        )

    def test_non_product_link_becomes_name_search(self) -> None:
        fortune = self.records[1]
        self.assertEqual(
            fortune.url,
            "https://www.jiomart.com/search/"
            "Fortune%20Chakki%20Fresh%20Atta%2010%20kg",
        )

    def test_text_scan_fallbacks(self) -> None:
        """Name and price recovered from unclassed markup."""
        pillsbury = self.records[2]
        self.assertEqual(pillsbury.name, "Pillsbury Chakki Fresh Atta 5 kg")
        self.assertEqual(pillsbury.price, "₹199")
        self.assertEqual(
            pillsbury.image,
            "https://www.jiomart.com/images/product/original/"
            "491187000/pillsbury.jpg",
        )

    def test_synthetic_reviews_range(self) -> None:
        for record in self.records:
            with self.subTest(name=record.name):
                self.assertGreaterEqual(record.reviews, 50)
                self.assertLess(record.reviews, 550)
                self.assertGreaterEqual(record.rating, 4.0)
                self.assertLessEqual(record.rating, 4.9)

    def test_generic_block_fallback(self) -> None:
        records = self.extractor.parse_results(
            load_fixture("jiomart_generic.html"), "earbuds"
        )
        self.assertEqual(
            [r.name for r in records],
            [
                "boAt Airdopes 141 Bluetooth TWS Earbuds",
                "Noise Buds VS104 Truly Wireless Earbuds",
            ],
        )
        self.assertEqual(records[0].price, "₹1,299")
        self.assertEqual(
            records[0].url,
            "https://www.jiomart.com/p/electronics/"
            "boat-airdopes-141-bluetooth-tws-earbuds/493665040",
        )


class TestJioMartNavigation(unittest.IsolatedAsyncioTestCase):
    """Navigation behaviour over a fake page."""

    async def test_scrolls_after_load(self) -> None:
        extractor = JioMartExtractor()
        page = FakePage(html=load_fixture("jiomart_search.html"))
        records = await extractor.extract(page, "atta")

        self.assertEqual(len(records), 8)
        self.assertEqual(page.visited, ["https://www.jiomart.com/search/atta"])
        self.assertEqual(page.navigation_timeout, 45_000)
        self.assertEqual(page.scripts, ["() => window.scrollBy(0, 500)"])
        self.assertEqual(page.waits, [4_000, 2_000])

    async def test_catalogsearch_fallback(self) -> None:
        extractor = JioMartExtractor()
        page = FakePage(
            html=load_fixture("jiomart_search.html"),
            fail_prefixes=("https://www.jiomart.com/search/",),
        )
        records = await extractor.extract(page, "whole wheat")

        self.assertEqual(
            page.visited,
            [
                "https://www.jiomart.com/search/whole%20wheat",
                "https://www.jiomart.com/catalogsearch/result"
                "?q=whole%20wheat",
            ],
        )
        self.assertEqual(len(records), 8)
        self.assertEqual(page.scripts, [])

    async def test_both_urls_fail(self) -> None:
        extractor = JioMartExtractor()
        page = FakePage(fail_prefixes=("https://www.jiomart.com/",))
        self.assertEqual(await extractor.extract(page, "atta"), [])


if __name__ == "__main__":
    unittest.main()
