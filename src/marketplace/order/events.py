"""Domain events for the PurchaseOrder aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="PurchaseOrder")
class OrderPlaced:
    """A checkout was recorded as a purchase order."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    owner_id = Identifier()
    lines = Text(required=True)  # JSON: list of {artwork_id, title, unit_price, quantity}
    line_count = Integer(required=True)
    total = Float(required=True)
    currency = String(max_length=3, required=True)
    placed_at = DateTime(required=True)
