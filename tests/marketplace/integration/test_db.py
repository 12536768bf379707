"""Tests for the schema management helpers."""

from marketplace.domain import marketplace
from marketplace.storage.store import SqlStore
from marketplace.utils.db import drop_db, setup_db


class TestSchemaManagement:
    def test_setup_and_drop_snapshot_table(self, tmp_path):
        store = SqlStore(f"sqlite:///{tmp_path / 'artistry.db'}")

        setup_db(marketplace, store)
        store.set("artistry_cart", b"[]")
        assert store.get("artistry_cart") == b"[]"

        drop_db(marketplace, store)
        store.engine.dispose()

    def test_setup_without_store(self):
        setup_db(marketplace)
        drop_db(marketplace)
