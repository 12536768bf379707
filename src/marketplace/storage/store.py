"""Durable key-value stores holding aggregate snapshots.

A store is a dumb sink: it keeps the last bytes written under a key and
knows nothing about carts or wishlists. Writers never coordinate, so two
sessions writing the same key resolve by last-write-wins.

Three backends are provided:

- ``MemoryStore``: process-local dictionary, used by tests and the
  ``memory`` backend.
- ``FileStore``: one file per key inside a directory. Writes go through a
  temporary file and an atomic rename so a crash never leaves a torn value.
- ``SqlStore``: a single key/value table reached through SQLAlchemy, for
  deployments that already run a database.
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

from sqlalchemy import Column, LargeBinary, MetaData, String, Table, create_engine, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError


class StoreError(Exception):
    """A durable store could not complete a read or a write."""

    def __init__(self, key, reason):
        self.key = key
        self.reason = reason
        super().__init__(f"Store operation on {key!r} failed: {reason}")


class DurableStore(ABC):
    """Interface shared by all snapshot stores."""

    backend = "abstract"

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or ``None`` when absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Replace the bytes stored under ``key``.

        Raises:
            StoreError: the value could not be written.
        """


class MemoryStore(DurableStore):
    backend = "memory"

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, bytes | bytearray):
            raise StoreError(key, f"expected bytes, got {type(value).__name__}")
        self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileStore(DurableStore):
    backend = "file"

    def __init__(self, directory: str | os.PathLike):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        # Owner-scoped keys contain ':'
        return self.directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(key, str(exc)) from exc

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(key, str(exc)) from exc


class SqlStore(DurableStore):
    backend = "sql"

    def __init__(self, database_uri: str, table_name: str = "durable_items"):
        self.database_uri = database_uri
        self.engine = create_engine(database_uri)
        self.metadata = MetaData()
        self.table = Table(
            table_name,
            self.metadata,
            Column("key", String(255), primary_key=True),
            Column("value", LargeBinary, nullable=False),
        )

    def create_schema(self) -> None:
        self.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        self.metadata.drop_all(self.engine)

    def get(self, key: str) -> bytes | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(self.table.c.value).where(self.table.c.key == key)).first()
        except SQLAlchemyError as exc:
            raise StoreError(key, str(exc)) from exc
        return bytes(row.value) if row is not None else None

    def set(self, key: str, value: bytes) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(self.table).where(self.table.c.key == key))
                conn.execute(insert(self.table).values(key=key, value=value))
        except SQLAlchemyError as exc:
            raise StoreError(key, str(exc)) from exc
