import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from marketplace.shared.artwork import ArtworkSnapshot
from marketplace.storage.store import MemoryStore


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def make_artwork():
    def _make(artwork_id="art-001", price=10.0, **overrides):
        defaults = {
            "artwork_id": artwork_id,
            "title": f"Artwork {artwork_id}",
            "image": f"https://cdn.example.com/{artwork_id}.jpg",
            "price": price,
            "creator": "mira",
        }
        defaults.update(overrides)
        return ArtworkSnapshot(**defaults)

    return _make
