"""Tests for the ArtworkSnapshot value object."""

import pytest
from protean.exceptions import ValidationError
from protean.utils import DomainObjects
from protean.utils.reflection import declared_fields

from marketplace.shared.artwork import ArtworkSnapshot


class TestArtworkSnapshot:
    def test_element_type(self):
        assert ArtworkSnapshot.element_type == DomainObjects.VALUE_OBJECT

    def test_declared_fields(self):
        fields = declared_fields(ArtworkSnapshot)
        for name in ("artwork_id", "title", "image", "price", "currency", "creator", "is_sold"):
            assert name in fields

    def test_defaults(self):
        artwork = ArtworkSnapshot(artwork_id="a1", title="Dawn", price=12.0)
        assert artwork.currency == "USD"
        assert artwork.is_sold is False

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ArtworkSnapshot(artwork_id="a1", title="Dawn", price=-1.0)

    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError):
            ArtworkSnapshot(artwork_id="a1", price=1.0)

    def test_unsupported_currency_rejected(self):
        with pytest.raises(ValidationError) as exc:
            ArtworkSnapshot(artwork_id="a1", title="Dawn", price=1.0, currency="XYZ")
        assert "Unsupported currency" in str(exc.value)

