# tests/test_flipkart_extractor.py

"""Tests for the Flipkart extractor."""

import unittest

from pricescout.extractors.flipkart_extractor import FlipkartExtractor
from tests.fake_page import load_fixture


class TestFlipkartExtractor(unittest.TestCase):
    """Parsing tests for flipkart_search.html."""

    def setUp(self) -> None:
        self.extractor = FlipkartExtractor()
        self.records = self.extractor.parse_results(
            load_fixture("flipkart_search.html"), "iphone"
        )

    def test_help_widget_skipped(self) -> None:
        self.assertEqual(len(self.records), 2)
        self.assertNotIn(
            "Need help?", [r.name for r in self.records]
        )

    def test_full_card(self) -> None:
        iphone = self.records[0]
        self.assertEqual(iphone.name, "Apple iPhone 15 (Black, 128 GB)")
        self.assertEqual(iphone.price, "₹65999")
        self.assertEqual(iphone.rating, 4.6)
        self.assertEqual(iphone.reviews, 120345)
        self.assertEqual(
            iphone.url,
            "https://www.flipkart.com/apple-iphone-15-black-128-gb/p/"
            "itm6ac6485515ae4?pid=MOBGTAGPTB3VS24W",
        )
        self.assertEqual(
            iphone.image,
            "https://rukminim2.flixcart.com/image/312/312/iphone-15.jpeg",
        )

    def test_sparse_card_fallbacks(self) -> None:
        redmi = self.records[1]
        self.assertEqual(redmi.price, "₹12499")
        self.assertEqual(redmi.rating, 4.0)
        self.assertEqual(redmi.reviews, 100)
        self.assertEqual(
            redmi.url,
            "https://www.flipkart.com/redmi-12-5g/p/itm1234567890"
            "?pid=MOBREDMI125G",
        )
        self.assertEqual(
            redmi.image, self.extractor.settings.PLACEHOLDER_IMAGE
        )

    def test_search_url(self) -> None:
        self.assertEqual(
            self.extractor.build_search_url("iphone 15"),
            "https://www.flipkart.com/search?q=iphone%2015",
        )


if __name__ == "__main__":
    unittest.main()
