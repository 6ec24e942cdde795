# pricescout/models/product.py

"""Product record model for inter-module data flow."""

import re
from dataclasses import asdict, dataclass

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class ProductRecord:
    """A single normalised product listing from any platform."""

    platform: str
    name: str
    price: str
    rating: float
    reviews: int
    url: str
    image: str

    @property
    def numeric_price(self) -> int:
        """Digits-only value of the display price (``₹1,299`` -> 1299).

        Anything after a decimal point is dropped.
        """
        whole = self.price.split(".", 1)[0]
        digits = _NON_DIGITS.sub("", whole)
        return int(digits) if digits else 0

    def to_dict(self) -> dict[str, object]:
        """Serialise to the JSON shape returned by the search API."""
        return asdict(self)
