"""Cart aggregate — the shopper's pending purchases.

A cart holds at most one line per artwork. Adding an artwork that is already
in the cart merges into the existing line; dropping a line's quantity to zero
removes it. Count and total are derived from the lines on every read so they
can never drift from the items they describe.

The aggregate is synchronous and storage-agnostic. Persistence happens in
``marketplace.cart.session``, which writes a full snapshot after every
mutation.
"""

from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, HasMany, Identifier, Integer, ValueObject

from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from marketplace.domain import marketplace
from marketplace.shared.artwork import ArtworkSnapshot


@marketplace.entity(part_of="Cart")
class LineItem:
    """One distinct artwork in the cart, with the price it was added at."""

    artwork = ValueObject(ArtworkSnapshot, required=True)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def item_id(self):
        return self.artwork.artwork_id

    @property
    def subtotal(self):
        return Decimal(str(self.unit_price)) * self.quantity


@marketplace.aggregate
class Cart:
    owner_id = Identifier()
    items = HasMany(LineItem)

    @invariant.post
    def one_line_per_artwork(self):
        item_ids = [item.item_id for item in self.items]
        if len(item_ids) != len(set(item_ids)):
            raise ValidationError({"items": ["An artwork can appear only once in the cart"]})

    @invariant.post
    def one_currency_per_cart(self):
        if len({item.artwork.currency for item in self.items}) > 1:
            raise ValidationError({"currency": ["All cart lines must share one currency"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id=None):
        return cls(owner_id=owner_id)

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def count(self):
        return sum(item.quantity for item in self.items)

    @property
    def total(self):
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def currency(self):
        """Currency of the cart, set by its first line. None while empty."""
        return self.items[0].artwork.currency if self.items else None

    def find(self, item_id):
        return next((i for i in self.items if i.item_id == str(item_id)), None)

    def is_in_cart(self, item_id):
        return self.find(item_id) is not None

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, artwork, quantity=1):
        """Add an artwork to the cart, or increase its quantity if already present."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if artwork.is_sold:
            raise ValidationError({"artwork": ["This artwork is already sold out"]})
        if self.currency is not None and artwork.currency != self.currency:
            raise ValidationError(
                {"currency": [f"Cart is priced in {self.currency}; cannot add an artwork priced in {artwork.currency}"]}
            )

        existing = self.find(artwork.artwork_id)
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = LineItem(artwork=artwork, unit_price=artwork.price, quantity=quantity)
            self.add_items(line)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                owner_id=self.owner_id,
                artwork_id=line.item_id,
                quantity=quantity,
                new_quantity=line.quantity,
                unit_price=line.unit_price,
            )
        )
        return line

    def remove_item(self, item_id):
        """Remove the line for ``item_id``. Removing an absent artwork is a no-op."""
        line = self.find(item_id)
        if line is None:
            return False

        self.remove_items(line)
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                owner_id=self.owner_id,
                artwork_id=line.item_id,
            )
        )
        return True

    def update_quantity(self, item_id, quantity):
        """Replace the quantity of a line; zero or less removes it."""
        if quantity <= 0:
            return self.remove_item(item_id)

        line = self.find(item_id)
        if line is None:
            return False

        previous_quantity = line.quantity
        line.quantity = quantity
        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                owner_id=self.owner_id,
                artwork_id=line.item_id,
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return True

    def clear(self):
        lines = list(self.items)
        for line in lines:
            self.remove_items(line)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                owner_id=self.owner_id,
                lines_removed=len(lines),
            )
        )
        return len(lines)
