"""SQLite engine for the state blob.

The database lives at ``{data_root}/.tasktrack/{filename}``. SQLAlchemy Core
is enough: one short-lived process reads and writes a single row.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from tasktrack.infrastructure.database.schema import metadata

DATA_DIRNAME = ".tasktrack"
DEFAULT_DB_FILENAME = "tasktrack.db"

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA busy_timeout=5000",
)


def database_path(data_root: Path, filename: str = DEFAULT_DB_FILENAME) -> Path:
    return data_root / DATA_DIRNAME / filename


def create_db_engine(db_path: Path) -> Engine:
    """Engine for *db_path*; every new connection gets WAL and a busy timeout."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _apply_pragmas(dbapi_conn: Any, _record: Any) -> None:
        cursor = dbapi_conn.cursor()
        for pragma in _PRAGMAS:
            cursor.execute(pragma)
        cursor.close()

    return engine


def init_database(data_root: Path, filename: str = DEFAULT_DB_FILENAME) -> Engine:
    """Create ``.tasktrack/`` and the tables if missing, then return the engine.

    Idempotent: an existing database is opened as is.
    """
    db_path = database_path(data_root, filename)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
