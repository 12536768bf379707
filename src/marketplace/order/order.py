"""PurchaseOrder aggregate — the server-side record of a completed checkout.

Line prices are copied from the cart at checkout time and never change.
Each checkout produces at most one order; the checkout id is the
idempotency key (see ``marketplace.order.placement``).
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced


class OrderStatus(Enum):
    COMPLETED = "Completed"


@marketplace.entity(part_of="PurchaseOrder")
class OrderLine:
    artwork_id = String(required=True, max_length=64)
    title = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    download_url = String(max_length=1000)


@marketplace.aggregate
class PurchaseOrder:
    owner_id = Identifier()
    checkout_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")
    status = String(choices=OrderStatus, default=OrderStatus.COMPLETED.value)
    placed_at = DateTime()

    @classmethod
    def place(cls, checkout_id, owner_id, lines, currency="USD"):
        """Create an order from a list of line dicts.

        Args:
            lines: dicts with artwork_id, title, unit_price, quantity and an
                optional download_url.
        """
        if not lines:
            raise ValidationError({"lines": ["Cannot place an order without lines"]})

        now = datetime.now(UTC)
        order_lines = [
            OrderLine(
                artwork_id=line["artwork_id"],
                title=line["title"],
                unit_price=line["unit_price"],
                quantity=line["quantity"],
                download_url=line.get("download_url"),
            )
            for line in lines
        ]
        total = sum((Decimal(str(line.unit_price)) * line.quantity for line in order_lines), Decimal("0"))

        order = cls(
            owner_id=owner_id,
            checkout_id=checkout_id,
            total=float(total),
            currency=currency,
            status=OrderStatus.COMPLETED.value,
            placed_at=now,
        )
        for line in order_lines:
            order.add_lines(line)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                checkout_id=str(checkout_id),
                owner_id=owner_id,
                lines=json.dumps(
                    [
                        {
                            "artwork_id": line.artwork_id,
                            "title": line.title,
                            "unit_price": line.unit_price,
                            "quantity": line.quantity,
                        }
                        for line in order_lines
                    ]
                ),
                line_count=len(order_lines),
                total=order.total,
                currency=currency,
                placed_at=now,
            )
        )
        return order
