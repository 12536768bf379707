"""JSON snapshot layout for carts and wishlists.

Layout, one key per aggregate:

    artistry_cart[:<owner>]      -> [{"artwork": {...}, "quantity": 2}, ...]
    artistry_wishlist[:<owner>]  -> [{...}, ...]

An artwork object is ``{"id", "title", "image", "price", "currency",
"creator": {"username"}, "isSold"}``. Unknown keys are ignored on read.

Decoding never raises: a value that is not valid JSON, or not a list, yields
an empty aggregate; an individual entry that cannot be understood is skipped.
"""

import json

import structlog
from protean.exceptions import ValidationError

from marketplace.cart.cart import Cart, LineItem
from marketplace.shared.artwork import ArtworkSnapshot
from marketplace.wishlist.wishlist import Wishlist, WishlistEntry

logger = structlog.get_logger(__name__)

CART_KEY = "artistry_cart"
WISHLIST_KEY = "artistry_wishlist"


def cart_key(owner_id=None):
    return f"{CART_KEY}:{owner_id}" if owner_id else CART_KEY


def wishlist_key(owner_id=None):
    return f"{WISHLIST_KEY}:{owner_id}" if owner_id else WISHLIST_KEY


# ---------------------------------------------------------------------------
# Artwork objects
# ---------------------------------------------------------------------------
def artwork_to_payload(artwork):
    return {
        "id": artwork.artwork_id,
        "title": artwork.title,
        "image": artwork.image,
        "price": artwork.price,
        "currency": artwork.currency,
        "creator": {"username": artwork.creator} if artwork.creator else None,
        "isSold": bool(artwork.is_sold),
    }


def artwork_from_payload(payload):
    """Build an ArtworkSnapshot from a stored or submitted artwork object."""
    if not isinstance(payload, dict):
        raise ValidationError({"artwork": ["Artwork must be an object"]})

    creator = payload.get("creator")
    if isinstance(creator, dict):
        creator = creator.get("username") or creator.get("displayName")

    artwork_id = payload.get("id", payload.get("artwork_id"))
    return ArtworkSnapshot(
        artwork_id=str(artwork_id) if artwork_id is not None else None,
        title=payload.get("title"),
        image=payload.get("image"),
        price=payload.get("price"),
        currency=payload.get("currency") or "USD",
        creator=creator,
        is_sold=bool(payload.get("isSold", payload.get("is_sold", False))),
    )


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def encode_cart(cart):
    lines = [{"artwork": artwork_to_payload(item.artwork), "quantity": item.quantity} for item in cart.items]
    return json.dumps(lines).encode("utf-8")


def encode_wishlist(wishlist):
    entries = [artwork_to_payload(entry.artwork) for entry in wishlist.entries]
    return json.dumps(entries).encode("utf-8")


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
def _load_list(raw, key):
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Failed to parse stored snapshot", key=key, error=str(exc))
        return []

    if not isinstance(data, list):
        logger.error("Stored snapshot is not a list", key=key, found=type(data).__name__)
        return []
    return data


def decode_cart(raw, owner_id=None):
    """Rehydrate a cart from snapshot bytes, falling back to an empty cart."""
    key = cart_key(owner_id)
    cart = Cart.create(owner_id=owner_id)

    for position, entry in enumerate(_load_list(raw, key)):
        try:
            artwork = artwork_from_payload(entry.get("artwork") if isinstance(entry, dict) else None)
            quantity = int(entry.get("quantity", 1))
            if quantity < 1:
                raise ValidationError({"quantity": [f"Invalid stored quantity {quantity}"]})
            if cart.currency is not None and artwork.currency != cart.currency:
                raise ValidationError({"currency": [f"Line priced in {artwork.currency}, cart in {cart.currency}"]})
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning("Skipping unreadable cart line", key=key, position=position, error=str(exc))
            continue

        existing = cart.find(artwork.artwork_id)
        if existing:
            existing.quantity += quantity
        else:
            cart.add_items(LineItem(artwork=artwork, unit_price=artwork.price, quantity=quantity))

    return cart


def decode_wishlist(raw, owner_id=None):
    """Rehydrate a wishlist from snapshot bytes, falling back to an empty wishlist."""
    key = wishlist_key(owner_id)
    wishlist = Wishlist.create(owner_id=owner_id)

    for position, entry in enumerate(_load_list(raw, key)):
        try:
            artwork = artwork_from_payload(entry)
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning("Skipping unreadable wishlist entry", key=key, position=position, error=str(exc))
            continue

        if not wishlist.is_present(artwork.artwork_id):
            wishlist.add_entries(WishlistEntry(artwork=artwork))

    return wishlist
