"""Domain events for the Wishlist aggregate."""

from protean.fields import Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Wishlist")
class WishlistItemAdded:
    """An artwork was saved to the wishlist."""

    __version__ = 1

    wishlist_id = Identifier(required=True)
    owner_id = Identifier()
    artwork_id = String(required=True)


@marketplace.event(part_of="Wishlist")
class WishlistItemRemoved:
    """An artwork was taken off the wishlist."""

    __version__ = 1

    wishlist_id = Identifier(required=True)
    owner_id = Identifier()
    artwork_id = String(required=True)


@marketplace.event(part_of="Wishlist")
class WishlistCleared:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    owner_id = Identifier()
    entries_removed = Integer(required=True)
