"""BDD tests for cart contents."""

from decimal import Decimal

from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

from marketplace.cart.session import CartSession
from marketplace.storage.snapshots import cart_key

scenarios("features/cart.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the stored cart snapshot is corrupt")
def corrupt_snapshot(bdd_store, owner_id):
    bdd_store.set(cart_key(owner_id), b"{oops")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('artwork "{artwork_id}" priced {price:f} is added with quantity {qty:d}'))
def add_artwork(cart, make_artwork, artwork_id, price, qty, error):
    try:
        cart.add_item(make_artwork(artwork_id, price), qty)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('sold artwork "{artwork_id}" priced {price:f} is added with quantity {qty:d}'))
def add_sold_artwork(cart, make_artwork, artwork_id, price, qty, error):
    try:
        cart.add_item(make_artwork(artwork_id, price, is_sold=True), qty)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the quantity of "{artwork_id}" is set to {qty:d}'))
def set_quantity(cart, artwork_id, qty):
    cart.update_quantity(artwork_id, qty)


@when(parsers.cfparse('artwork "{artwork_id}" is removed from the cart'))
def remove_artwork(cart, artwork_id):
    cart.remove_item(artwork_id)


@when("the cart is cleared")
def clear_cart(cart):
    cart.clear()


@when("the cart is loaded", target_fixture="cart")
def load_cart(bdd_store, owner_id):
    return CartSession(bdd_store, owner_id=owner_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the line for "{artwork_id}" has quantity {qty:d}'))
def line_quantity(cart, artwork_id, qty):
    assert cart.cart.find(artwork_id).quantity == qty


@then(parsers.cfparse("the cart total is {total}"))
def cart_total(cart, total):
    assert cart.total == Decimal(total)


@then(parsers.cfparse("the cart count is {count:d}"))
def cart_count(cart, count):
    assert cart.count == count
