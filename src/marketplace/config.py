"""Runtime settings for the marketplace, read from the environment."""

import os
from dataclasses import dataclass

from marketplace.storage.store import FileStore, MemoryStore, SqlStore
from marketplace.ui.reveal import DEFAULT_REVEAL_SECONDS

STORE_BACKENDS = ("memory", "file", "sql")


def _optional_float(value):
    return float(value) if value not in (None, "") else None


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    store_backend: str = "file"
    store_path: str = ".artistry"
    database_uri: str = "sqlite:///artistry.db"
    reveal_seconds: float = DEFAULT_REVEAL_SECONDS
    download_dir: str | None = None
    download_timeout: float | None = None

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ

        backend = environ.get("STORE_BACKEND", cls.store_backend).lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"Unknown STORE_BACKEND {backend!r}; expected one of {', '.join(STORE_BACKENDS)}")

        return cls(
            env=(environ.get("PROTEAN_ENV") or environ.get("ENVIRONMENT") or cls.env).lower(),
            store_backend=backend,
            store_path=environ.get("STORE_PATH", cls.store_path),
            database_uri=environ.get("DATABASE_URI", cls.database_uri),
            reveal_seconds=float(environ.get("CART_REVEAL_SECONDS", cls.reveal_seconds)),
            download_dir=environ.get("DOWNLOAD_DIR") or None,
            download_timeout=_optional_float(environ.get("DOWNLOAD_TIMEOUT")),
        )


def build_store(settings):
    if settings.store_backend == "memory":
        return MemoryStore()
    if settings.store_backend == "sql":
        store = SqlStore(settings.database_uri)
        store.create_schema()
        return store
    return FileStore(settings.store_path)
