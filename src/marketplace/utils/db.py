from protean.domain import Domain
from sqlalchemy import create_engine

from marketplace.storage.store import SqlStore


def setup_db(domain: Domain, store: SqlStore | None = None):
    """Create RDBMS tables for the domain's providers and the snapshot store."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in ("sqlite", "postgresql"):
                engine = create_engine(provider.conn_info["database_uri"])

                # Accessing _dao forces each aggregate to be registered with SQLAlchemy
                for _, aggregate_record in domain.registry.aggregates.items():
                    if aggregate_record.cls.meta_.provider == provider.name:
                        domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

                for _, entity_record in domain.registry.entities.items():
                    if entity_record.cls.meta_.provider == provider.name:
                        domain.repository_for(entity_record.cls)._dao  # noqa: B018

                provider._metadata.create_all(engine)

    if store is not None:
        store.create_schema()


def drop_db(domain: Domain, store: SqlStore | None = None):
    """Drop RDBMS tables for the domain's providers and the snapshot store."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in ("sqlite", "postgresql"):
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)

    if store is not None:
        store.drop_schema()
