"""Checkout flow — turns the cart into a purchase.

State Machine:
    IDLE → REVIEWING → PURCHASING → COMPLETED
                          ↓
                        FAILED → REVIEWING (retry)

Flow:
    1. review() shows the cart snapshot; remove_item() edits it in place.
    2. purchase() optionally records a purchase order keyed by the checkout
       id. A rejected order ends in FAILED with the cart untouched.
    3. One download is triggered per line. A failing download is collected
       and reported but never stops the purchase.
    4. The cart is cleared and the flow ends in COMPLETED.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import uuid4

import structlog
from protean.exceptions import ValidationError

from marketplace.checkout.downloads import LinkDownloads

logger = structlog.get_logger(__name__)

CONFIRMATION_MESSAGE = "Thank you for your purchase! Your downloads should start automatically."
DOWNLOAD_ALERT = "Some downloads could not be started. You can download them again from your order history."
FAILURE_MESSAGE = "Failed to complete purchase. Please try again."
AFTER_PURCHASE_PATH = "/marketplace"


class CheckoutState(Enum):
    IDLE = "Idle"
    REVIEWING = "Reviewing"
    PURCHASING = "Purchasing"
    COMPLETED = "Completed"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    CheckoutState.IDLE: {CheckoutState.REVIEWING},
    CheckoutState.REVIEWING: {CheckoutState.REVIEWING, CheckoutState.PURCHASING},
    CheckoutState.PURCHASING: {CheckoutState.COMPLETED, CheckoutState.FAILED},
    CheckoutState.FAILED: {CheckoutState.REVIEWING},
    CheckoutState.COMPLETED: set(),  # Terminal
}


@dataclass(frozen=True)
class PurchasedLine:
    """Immutable copy of a cart line taken when the purchase starts."""

    artwork_id: str
    title: str
    image: str | None
    unit_price: float
    quantity: int
    currency: str = "USD"

    @classmethod
    def from_line_item(cls, item):
        return cls(
            artwork_id=item.item_id,
            title=item.artwork.title,
            image=item.artwork.image,
            unit_price=item.unit_price,
            quantity=item.quantity,
            currency=item.artwork.currency or "USD",
        )

    @property
    def filename(self):
        return f"{self.title}.jpg"

    @property
    def subtotal(self):
        return Decimal(str(self.unit_price)) * self.quantity

    def as_order_line(self):
        return {
            "artwork_id": self.artwork_id,
            "title": self.title,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "download_url": self.image,
        }


@dataclass
class CheckoutReceipt:
    checkout_id: str
    state: CheckoutState
    lines: list[PurchasedLine]
    total: Decimal
    message: str
    order_id: str | None = None
    downloads: list = field(default_factory=list)
    failed_downloads: dict[str, str] = field(default_factory=dict)
    alert: str | None = None
    redirect_to: str | None = None
    failure_reason: str | None = None


class CheckoutFlow:
    """Drive one checkout of a cart session.

    Args:
        cart_session: the ``CartSession`` being checked out.
        download: callable invoked once per ``PurchasedLine``.
        record_order: optional callable ``(checkout_id, owner_id, lines,
            total, currency) -> order_id``. Without it the purchase is
            completed on the client side only.
    """

    def __init__(self, cart_session, download=None, record_order=None, checkout_id=None):
        self.cart_session = cart_session
        self.download = download or LinkDownloads()
        self.record_order = record_order
        self.checkout_id = checkout_id or str(uuid4())
        self.state = CheckoutState.IDLE
        self.failure_reason = None

    def _transition(self, target):
        if target not in _VALID_TRANSITIONS[self.state]:
            raise ValidationError(
                {"state": [f"Cannot move checkout from {self.state.value} to {target.value}"]}
            )
        logger.debug(
            "Checkout transition",
            checkout_id=self.checkout_id,
            from_state=self.state.value,
            to_state=target.value,
        )
        self.state = target

    @property
    def snapshot(self):
        return [PurchasedLine.from_line_item(item) for item in self.cart_session.items]

    @property
    def total(self):
        return self.cart_session.total

    def review(self):
        """Show the cart contents about to be purchased."""
        self._transition(CheckoutState.REVIEWING)
        self.failure_reason = None
        return self.snapshot

    def remove_item(self, item_id):
        if self.state != CheckoutState.REVIEWING:
            raise ValidationError({"state": ["Items can only be removed while reviewing"]})
        self.cart_session.remove_item(item_id)
        return self.snapshot

    def purchase(self):
        if self.state != CheckoutState.REVIEWING:
            raise ValidationError({"state": ["Purchase requires a reviewed cart"]})

        lines = self.snapshot
        if not lines:
            raise ValidationError({"cart": ["Cannot purchase an empty cart"]})

        total = self.total
        currency = lines[0].currency
        self._transition(CheckoutState.PURCHASING)

        order_id = None
        if self.record_order is not None:
            try:
                order_id = self.record_order(
                    self.checkout_id,
                    self.cart_session.owner_id,
                    [line.as_order_line() for line in lines],
                    total,
                    currency,
                )
            except ValidationError as exc:
                return self._fail(lines, total, str(exc.messages))
            except Exception as exc:
                self._fail(lines, total, str(exc))
                raise

        downloads = []
        failed_downloads = {}
        for line in lines:
            try:
                downloads.append(self.download(line))
            except Exception as exc:
                logger.error(
                    "Failed to trigger download",
                    checkout_id=self.checkout_id,
                    artwork_id=line.artwork_id,
                    error=str(exc),
                )
                failed_downloads[line.artwork_id] = str(exc)

        self.cart_session.clear()
        self._transition(CheckoutState.COMPLETED)

        logger.info(
            "Checkout completed",
            checkout_id=self.checkout_id,
            order_id=order_id,
            lines=len(lines),
            total=str(total),
            failed_downloads=len(failed_downloads),
        )
        return CheckoutReceipt(
            checkout_id=self.checkout_id,
            state=self.state,
            lines=lines,
            total=total,
            message=CONFIRMATION_MESSAGE,
            order_id=order_id,
            downloads=downloads,
            failed_downloads=failed_downloads,
            alert=DOWNLOAD_ALERT if failed_downloads else None,
            redirect_to=AFTER_PURCHASE_PATH,
        )

    def _fail(self, lines, total, reason):
        self._transition(CheckoutState.FAILED)
        self.failure_reason = reason
        logger.error("Checkout failed", checkout_id=self.checkout_id, reason=reason)
        return CheckoutReceipt(
            checkout_id=self.checkout_id,
            state=self.state,
            lines=lines,
            total=total,
            message=FAILURE_MESSAGE,
            failure_reason=reason,
        )
