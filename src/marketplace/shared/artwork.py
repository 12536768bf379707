"""Artwork snapshot value object.

The cart and the wishlist never consult the live catalogue: they embed the
artwork as it looked when the shopper acted on it, price included.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String

from marketplace.domain import marketplace

VALID_CURRENCIES = frozenset({"USD", "EUR", "GBP", "CAD", "AUD", "JPY", "INR"})


@marketplace.value_object
class ArtworkSnapshot:
    """Catalogue facts about an artwork, frozen at the time it was added."""

    artwork_id: String(required=True, max_length=64)
    title: String(required=True, max_length=255)
    image: String(max_length=1000)
    price: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default="USD")
    creator: String(max_length=100)
    is_sold: Boolean(default=False)

    @invariant.post
    def currency_must_be_supported(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})
