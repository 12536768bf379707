"""Order placement — command, handler and the checkout-facing recorder.

Placing an order is idempotent per checkout: a repeated ``PlaceOrder`` with
the same ``checkout_id`` returns the order that was already recorded instead
of creating a second one.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import PurchaseOrder

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="PurchaseOrder")
class PlaceOrder:
    """Record a completed checkout as a purchase order."""

    checkout_id = Identifier(required=True)
    owner_id = Identifier()
    lines = Text(required=True)  # JSON: list of {artwork_id, title, unit_price, quantity, download_url}
    currency = String(max_length=3, default="USD")
    total = Float()  # Informational; the order recomputes its own total


@marketplace.command_handler(part_of=PurchaseOrder)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(PurchaseOrder)

        existing = repo._dao.query.filter(checkout_id=command.checkout_id).all().items
        if existing:
            logger.info(
                "Order already recorded for checkout",
                checkout_id=command.checkout_id,
                order_id=str(existing[0].id),
            )
            return str(existing[0].id)

        lines = json.loads(command.lines) if isinstance(command.lines, str) else command.lines
        order = PurchaseOrder.place(
            checkout_id=command.checkout_id,
            owner_id=command.owner_id,
            lines=lines,
            currency=command.currency or "USD",
        )
        repo.add(order)

        if command.total is not None and abs(command.total - order.total) > 0.005:
            logger.warning(
                "Checkout total differs from recorded order total",
                checkout_id=command.checkout_id,
                checkout_total=command.total,
                order_total=order.total,
            )

        logger.info("Order placed", order_id=str(order.id), checkout_id=command.checkout_id, total=order.total)
        return str(order.id)


def record_purchase(checkout_id, owner_id, lines, total, currency="USD"):
    """Default order recorder used by the checkout flow."""
    return current_domain.process(
        PlaceOrder(
            checkout_id=checkout_id,
            owner_id=owner_id,
            lines=json.dumps(lines),
            currency=currency,
            total=float(total),
        ),
        asynchronous=False,
    )


def orders_for(owner_id):
    """Return the owner's purchase orders, newest first."""
    repo = current_domain.repository_for(PurchaseOrder)
    orders = repo._dao.query.filter(owner_id=owner_id).all().items
    return sorted(orders, key=lambda order: order.placed_at, reverse=True)
