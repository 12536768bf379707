"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from marketplace.cart.session import CartSession
from marketplace.storage.store import MemoryStore
from marketplace.wishlist.session import WishlistSession

# Map event name strings to classes for dynamic lookup in Then steps
_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def owner_id():
    return "profile-001"


@pytest.fixture()
def bdd_store():
    return MemoryStore()


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def events():
    """Events published by the cart session during the When steps."""
    return []


# ---------------------------------------------------------------------------
# Given steps: Cart
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart(bdd_store, owner_id, events):
    session = CartSession(bdd_store, owner_id=owner_id)
    session.subscribe(events.append)
    return session


@given(parsers.cfparse('artwork "{artwork_id}" priced {price:f} is in the cart'), target_fixture="cart")
def cart_with_artwork(cart, make_artwork, artwork_id, price, events):
    cart.add_item(make_artwork(artwork_id, price))
    events.clear()
    return cart


# ---------------------------------------------------------------------------
# Given steps: Wishlist
# ---------------------------------------------------------------------------
@given("an empty wishlist", target_fixture="wishlist")
def empty_wishlist(bdd_store, owner_id):
    return WishlistSession(bdd_store, owner_id=owner_id)


# ---------------------------------------------------------------------------
# Then steps: Cart (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_line(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(cart, count):
    assert len(cart.items) == count


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(events, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in events]}"


@then("no cart event is raised")
def no_cart_event(events):
    assert events == []
