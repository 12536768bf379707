"""Snapshot-backed session over a single aggregate.

A session rehydrates its aggregate from a durable store when opened and
writes the full snapshot back after every mutation. Write failures are logged
and swallowed: the in-memory aggregate stays authoritative for the rest of
the session, and the next successful write carries the whole state again.

Events raised by the aggregate are handed to subscribers after the snapshot
has been written, then cleared.
"""

import structlog

from marketplace.storage.store import StoreError

logger = structlog.get_logger(__name__)


class SnapshotSession:
    kind = "aggregate"

    def __init__(self, store, owner_id=None):
        self.store = store
        self.owner_id = owner_id
        self.key = self.key_for(owner_id)
        self._subscribers = []
        self.aggregate = self._load()

    # Subclass hooks
    def key_for(self, owner_id):
        raise NotImplementedError

    def encode(self, aggregate):
        raise NotImplementedError

    def decode(self, raw, owner_id):
        raise NotImplementedError

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _load(self):
        try:
            raw = self.store.get(self.key)
        except StoreError as exc:
            logger.error("Failed to read snapshot", kind=self.kind, key=self.key, error=exc.reason)
            raw = None
        return self.decode(raw, self.owner_id)

    def reload(self):
        """Discard in-memory state and rehydrate from the store."""
        self.aggregate = self._load()
        return self.aggregate

    def persist(self):
        """Write the full snapshot. Returns False when the store rejected it."""
        try:
            self.store.set(self.key, self.encode(self.aggregate))
        except StoreError as exc:
            logger.error("Failed to persist snapshot", kind=self.kind, key=self.key, error=exc.reason)
            return False
        return True

    # -------------------------------------------------------------------
    # Event fan-out
    # -------------------------------------------------------------------
    def subscribe(self, callback):
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def commit(self):
        self.persist()

        events = list(self.aggregate._events)
        self.aggregate._events.clear()
        for event in events:
            logger.debug("Publishing event", kind=self.kind, event_type=type(event).__name__)
            for callback in list(self._subscribers):
                callback(event)
