"""Cart session — one profile's cart, rehydrated from and persisted to a store."""

from marketplace.storage.session import SnapshotSession
from marketplace.storage.snapshots import cart_key, decode_cart, encode_cart


class CartSession(SnapshotSession):
    kind = "cart"

    def key_for(self, owner_id):
        return cart_key(owner_id)

    def encode(self, aggregate):
        return encode_cart(aggregate)

    def decode(self, raw, owner_id):
        return decode_cart(raw, owner_id)

    @property
    def cart(self):
        return self.aggregate

    @property
    def items(self):
        return list(self.cart.items)

    @property
    def count(self):
        return self.cart.count

    @property
    def total(self):
        return self.cart.total

    def is_in_cart(self, item_id):
        return self.cart.is_in_cart(item_id)

    def add_item(self, artwork, quantity=1):
        line = self.cart.add_item(artwork, quantity)
        self.commit()
        return line

    def remove_item(self, item_id):
        removed = self.cart.remove_item(item_id)
        self.commit()
        return removed

    def update_quantity(self, item_id, quantity):
        changed = self.cart.update_quantity(item_id, quantity)
        self.commit()
        return changed

    def clear(self):
        removed = self.cart.clear()
        self.commit()
        return removed
