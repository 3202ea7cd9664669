"""SQLite database engine and key-value schema via SQLAlchemy Core."""

from tasktrack.infrastructure.database.engine import (
    create_db_engine,
    database_path,
    init_database,
)
from tasktrack.infrastructure.database.schema import kv_store, metadata

__all__ = [
    "create_db_engine",
    "database_path",
    "init_database",
    "kv_store",
    "metadata",
]
