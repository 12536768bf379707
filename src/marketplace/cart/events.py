"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Cart")
class CartItemAdded:
    """An artwork was added to the cart, or its quantity was increased by an add."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier()
    artwork_id = String(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    unit_price = Float(required=True)


@marketplace.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart line was replaced."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier()
    artwork_id = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier()
    artwork_id = String(required=True)


@marketplace.event(part_of="Cart")
class CartCleared:
    """Every line was removed from the cart at once."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier()
    lines_removed = Integer(required=True)
