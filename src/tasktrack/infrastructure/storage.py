"""Durable key-value byte stores.

A storage medium exposes get/set by key and is treated by callers as
always-available but fallible per call. Every backend raises
:class:`StorageReadError` / :class:`StorageWriteError` instead of leaking
driver exceptions, so the persistence gateway can recover from any of them
the same way.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from tasktrack.infrastructure.database.engine import init_database
from tasktrack.infrastructure.database.schema import kv_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from tasktrack.config.settings import TaskTrackSettings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for storage medium failures."""


class StorageReadError(StorageError):
    """The medium could not be read."""


class StorageWriteError(StorageError):
    """The medium could not be written."""


class StorageMedium(Protocol):
    """Minimal byte store contract used by the persistence gateway."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...

    def close(self) -> None: ...


class MemoryStorage:
    """Process-local storage. Nothing survives the process."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def close(self) -> None:
        return


class SqliteStorage:
    """SQLite-backed storage on a single ``kv_store`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> bytes | None:
        try:
            with self._engine.connect() as conn:
                value = conn.execute(
                    select(kv_store.c.value).where(kv_store.c.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            msg = f"Failed to read key {key!r}: {exc}"
            raise StorageReadError(msg) from exc
        return bytes(value) if value is not None else None

    def set(self, key: str, value: bytes) -> None:
        updated = datetime.now(UTC).isoformat()
        stmt = sqlite_insert(kv_store).values(key=key, value=value, updated=updated)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_store.c.key],
            set_={"value": stmt.excluded.value, "updated": stmt.excluded.updated},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            msg = f"Failed to write key {key!r}: {exc}"
            raise StorageWriteError(msg) from exc

    def delete(self, key: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(delete(kv_store).where(kv_store.c.key == key))
        except SQLAlchemyError as exc:
            msg = f"Failed to delete key {key!r}: {exc}"
            raise StorageWriteError(msg) from exc

    def close(self) -> None:
        self._engine.dispose()


def create_storage(settings: TaskTrackSettings) -> StorageMedium:
    """Build the storage backend selected by ``[storage] backend``."""
    backend = settings.storage.backend
    if backend == "memory":
        logger.debug("Using in-memory storage")
        return MemoryStorage()
    engine = init_database(settings.data_root, settings.storage.filename)
    logger.debug("Using SQLite storage at %s", engine.url.database)
    return SqliteStorage(engine)
