"""Marketplace bounded context — Cart, Wishlist, Checkout and Purchase Orders.

Carts and wishlists are snapshot-persisted aggregates owned by a single
profile session. Checkout converts the cart contents into a purchase order
and a set of artwork downloads.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
