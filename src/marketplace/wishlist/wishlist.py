"""Wishlist aggregate — artworks a shopper has saved for later.

Entries are unique by artwork. Adding an artwork that is already saved is a
no-op, as is removing one that is not.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, ValueObject

from marketplace.domain import marketplace
from marketplace.shared.artwork import ArtworkSnapshot
from marketplace.wishlist.events import WishlistCleared, WishlistItemAdded, WishlistItemRemoved


@marketplace.entity(part_of="Wishlist")
class WishlistEntry:
    artwork = ValueObject(ArtworkSnapshot, required=True)
    added_at = DateTime()

    @property
    def item_id(self):
        return self.artwork.artwork_id


@marketplace.aggregate
class Wishlist:
    owner_id = Identifier()
    entries = HasMany(WishlistEntry)

    @invariant.post
    def entries_must_be_unique(self):
        item_ids = [entry.item_id for entry in self.entries]
        if len(item_ids) != len(set(item_ids)):
            raise ValidationError({"entries": ["An artwork can be saved only once"]})

    @classmethod
    def create(cls, owner_id=None):
        return cls(owner_id=owner_id)

    @property
    def count(self):
        return len(self.entries)

    def find(self, item_id):
        return next((e for e in self.entries if e.item_id == str(item_id)), None)

    def is_present(self, item_id):
        return self.find(item_id) is not None

    def add_item(self, artwork):
        """Save an artwork. Returns False when it was already saved."""
        if self.is_present(artwork.artwork_id):
            return False

        self.add_entries(WishlistEntry(artwork=artwork, added_at=datetime.now(UTC)))
        self.raise_(
            WishlistItemAdded(
                wishlist_id=str(self.id),
                owner_id=self.owner_id,
                artwork_id=artwork.artwork_id,
            )
        )
        return True

    def remove_item(self, item_id):
        entry = self.find(item_id)
        if entry is None:
            return False

        self.remove_entries(entry)
        self.raise_(
            WishlistItemRemoved(
                wishlist_id=str(self.id),
                owner_id=self.owner_id,
                artwork_id=entry.item_id,
            )
        )
        return True

    def toggle(self, artwork):
        """Save the artwork if absent, drop it if present. Returns the new presence."""
        if self.remove_item(artwork.artwork_id):
            return False
        return self.add_item(artwork)

    def clear(self):
        entries = list(self.entries)
        for entry in entries:
            self.remove_entries(entry)

        self.raise_(
            WishlistCleared(
                wishlist_id=str(self.id),
                owner_id=self.owner_id,
                entries_removed=len(entries),
            )
        )
        return len(entries)
