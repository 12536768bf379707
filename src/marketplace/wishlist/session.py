"""Wishlist session — one profile's wishlist, rehydrated from and persisted to a store."""

from marketplace.storage.session import SnapshotSession
from marketplace.storage.snapshots import decode_wishlist, encode_wishlist, wishlist_key


class WishlistSession(SnapshotSession):
    kind = "wishlist"

    def key_for(self, owner_id):
        return wishlist_key(owner_id)

    def encode(self, aggregate):
        return encode_wishlist(aggregate)

    def decode(self, raw, owner_id):
        return decode_wishlist(raw, owner_id)

    @property
    def wishlist(self):
        return self.aggregate

    @property
    def items(self):
        return [entry.artwork for entry in self.wishlist.entries]

    @property
    def count(self):
        return self.wishlist.count

    def is_present(self, item_id):
        return self.wishlist.is_present(item_id)

    def add_item(self, artwork):
        added = self.wishlist.add_item(artwork)
        self.commit()
        return added

    def remove_item(self, item_id):
        removed = self.wishlist.remove_item(item_id)
        self.commit()
        return removed

    def toggle(self, artwork):
        present = self.wishlist.toggle(artwork)
        self.commit()
        return present

    def clear(self):
        removed = self.wishlist.clear()
        self.commit()
        return removed
