# tests/test_ajio_extractor.py

"""Tests for the Ajio extractor."""

import unittest

from pricescout.extractors.ajio_extractor import AjioExtractor
from tests.fake_page import load_fixture


class TestAjioExtractor(unittest.TestCase):
    """Parsing tests for ajio_search.html."""

    def setUp(self) -> None:
        self.extractor = AjioExtractor()
        self.records = self.extractor.parse_results(
            load_fixture("ajio_search.html"), "jeans"
        )

    def test_priceless_card_skipped(self) -> None:
        self.assertEqual(
            [r.name for r in self.records],
            ["DNMX Washed Slim Fit Jeans", "LEVIS 511 Slim Fit Jeans"],
        )

    def test_price_digits_only(self) -> None:
        self.assertEqual(self.records[0].price, "₹899")
        self.assertEqual(self.records[1].price, "₹1499")

    def test_urls_and_images(self) -> None:
        dnmx, levis = self.records
        self.assertEqual(
            dnmx.url,
            "https://www.ajio.com/dnmx-washed-slim-fit-jeans/p/"
            "441121212_blue",
        )
        self.assertEqual(
            dnmx.image,
            "https://assets.ajio.com/medias/sys_master/root/dnmx-jeans.jpg",
        )
        self.assertEqual(
            levis.image, self.extractor.settings.PLACEHOLDER_IMAGE
        )

    def test_synthetic_rating_and_reviews(self) -> None:
        for record in self.records:
            with self.subTest(name=record.name):
                self.assertEqual(
                    record.rating,
                    AjioExtractor.synthetic_rating(record.name),
                )
                self.assertGreaterEqual(record.reviews, 100)
                self.assertLess(record.reviews, 1100)

    def test_search_url(self) -> None:
        self.assertEqual(
            self.extractor.build_search_url("slim jeans"),
            "https://www.ajio.com/search/?text=slim%20jeans",
        )


if __name__ == "__main__":
    unittest.main()
