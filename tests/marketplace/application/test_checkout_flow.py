"""Application tests for the checkout flow state machine."""

import pytest
from protean.exceptions import ValidationError

from marketplace.cart.session import CartSession
from marketplace.checkout.downloads import Download, DownloadError, LinkDownloads
from marketplace.checkout.flow import (
    AFTER_PURCHASE_PATH,
    CONFIRMATION_MESSAGE,
    DOWNLOAD_ALERT,
    CheckoutFlow,
    CheckoutState,
)


@pytest.fixture()
def cart(store, make_artwork):
    session = CartSession(store, owner_id="profile-001")
    session.add_item(make_artwork("a1", price=10.0), 2)
    session.add_item(make_artwork("a2", price=5.0))
    return session


class RecordingDownloads:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def __call__(self, line):
        self.calls.append(line.artwork_id)
        if line.artwork_id in self.failing:
            raise DownloadError(line.artwork_id, "blocked by browser")
        return Download(artwork_id=line.artwork_id, filename=line.filename, url=line.image)


class TestStateMachine:
    def test_starts_idle(self, cart):
        assert CheckoutFlow(cart).state == CheckoutState.IDLE

    def test_review_moves_to_reviewing(self, cart):
        flow = CheckoutFlow(cart)
        lines = flow.review()
        assert flow.state == CheckoutState.REVIEWING
        assert [line.artwork_id for line in lines] == ["a1", "a2"]
        assert lines[0].quantity == 2

    def test_remove_while_reviewing_stays_reviewing(self, cart):
        flow = CheckoutFlow(cart)
        flow.review()
        lines = flow.remove_item("a1")

        assert flow.state == CheckoutState.REVIEWING
        assert [line.artwork_id for line in lines] == ["a2"]
        assert not cart.is_in_cart("a1")

    def test_remove_before_review_rejected(self, cart):
        with pytest.raises(ValidationError):
            CheckoutFlow(cart).remove_item("a1")

    def test_purchase_before_review_rejected(self, cart):
        with pytest.raises(ValidationError):
            CheckoutFlow(cart).purchase()

    def test_purchase_of_empty_cart_rejected(self, store):
        flow = CheckoutFlow(CartSession(store))
        flow.review()
        with pytest.raises(ValidationError) as exc:
            flow.purchase()
        assert "empty cart" in str(exc.value)
        assert flow.state == CheckoutState.REVIEWING

    def test_completed_is_terminal(self, cart):
        flow = CheckoutFlow(cart, download=RecordingDownloads())
        flow.review()
        flow.purchase()

        with pytest.raises(ValidationError):
            flow.review()


class TestPurchase:
    def test_completes_and_clears_cart(self, cart, store):
        downloads = RecordingDownloads()
        flow = CheckoutFlow(cart, download=downloads)
        flow.review()
        receipt = flow.purchase()

        assert receipt.state == CheckoutState.COMPLETED
        assert flow.state == CheckoutState.COMPLETED
        assert receipt.total == 25
        assert receipt.message == CONFIRMATION_MESSAGE
        assert receipt.redirect_to == AFTER_PURCHASE_PATH
        assert downloads.calls == ["a1", "a2"]
        assert cart.items == []
        assert CartSession(store, owner_id="profile-001").items == []

    def test_download_failures_do_not_stop_purchase(self, cart):
        flow = CheckoutFlow(cart, download=RecordingDownloads(failing={"a1", "a2"}))
        flow.review()
        receipt = flow.purchase()

        assert receipt.state == CheckoutState.COMPLETED
        assert set(receipt.failed_downloads) == {"a1", "a2"}
        assert receipt.alert == DOWNLOAD_ALERT
        assert cart.items == []

    def test_partial_download_failure(self, cart):
        flow = CheckoutFlow(cart, download=RecordingDownloads(failing={"a2"}))
        flow.review()
        receipt = flow.purchase()

        assert [d.artwork_id for d in receipt.downloads] == ["a1"]
        assert list(receipt.failed_downloads) == ["a2"]

    def test_default_downloads_return_links(self, cart):
        flow = CheckoutFlow(cart)
        flow.review()
        receipt = flow.purchase()

        assert receipt.downloads[0] == Download(
            artwork_id="a1",
            filename="Artwork a1.jpg",
            url="https://cdn.example.com/a1.jpg",
        )

    def test_link_downloads_require_an_image(self, store, make_artwork):
        session = CartSession(store)
        session.add_item(make_artwork("a1", image=None))
        flow = CheckoutFlow(session, download=LinkDownloads())
        flow.review()
        receipt = flow.purchase()
        assert "a1" in receipt.failed_downloads

    def test_receipt_lines_are_a_snapshot(self, cart):
        flow = CheckoutFlow(cart, download=RecordingDownloads())
        flow.review()
        receipt = flow.purchase()
        assert [(line.artwork_id, line.quantity, line.unit_price) for line in receipt.lines] == [
            ("a1", 2, 10.0),
            ("a2", 1, 5.0),
        ]


class TestOrderRecording:
    def test_recorder_receives_checkout(self, cart):
        calls = []

        def record(checkout_id, owner_id, lines, total, currency):
            calls.append((checkout_id, owner_id, lines, total, currency))
            return "order-001"

        flow = CheckoutFlow(cart, download=RecordingDownloads(), record_order=record, checkout_id="chk-001")
        flow.review()
        receipt = flow.purchase()

        assert receipt.order_id == "order-001"
        checkout_id, owner_id, lines, total, currency = calls[0]
        assert checkout_id == "chk-001"
        assert owner_id == "profile-001"
        assert total == 25
        assert currency == "USD"
        assert lines[0] == {
            "artwork_id": "a1",
            "title": "Artwork a1",
            "unit_price": 10.0,
            "quantity": 2,
            "download_url": "https://cdn.example.com/a1.jpg",
        }

    def test_rejected_order_fails_and_keeps_cart(self, cart):
        def reject(*args):
            raise ValidationError({"order": ["Order service rejected the purchase"]})

        downloads = RecordingDownloads()
        flow = CheckoutFlow(cart, download=downloads, record_order=reject)
        flow.review()
        receipt = flow.purchase()

        assert receipt.state == CheckoutState.FAILED
        assert flow.state == CheckoutState.FAILED
        assert "rejected" in receipt.failure_reason
        assert downloads.calls == []
        assert cart.count == 3

    def test_failed_checkout_can_be_retried(self, cart):
        attempts = []

        def flaky(checkout_id, *args):
            attempts.append(checkout_id)
            if len(attempts) == 1:
                raise ValidationError({"order": ["Temporarily unavailable"]})
            return "order-002"

        flow = CheckoutFlow(cart, download=RecordingDownloads(), record_order=flaky)
        flow.review()
        assert flow.purchase().state == CheckoutState.FAILED

        flow.review()
        receipt = flow.purchase()
        assert receipt.state == CheckoutState.COMPLETED
        assert attempts[0] == attempts[1] == flow.checkout_id

    def test_unexpected_recorder_error_propagates(self, cart):
        def broken(*args):
            raise RuntimeError("connection reset")

        flow = CheckoutFlow(cart, download=RecordingDownloads(), record_order=broken)
        flow.review()
        with pytest.raises(RuntimeError):
            flow.purchase()

        assert flow.state == CheckoutState.FAILED
        assert cart.count == 3
