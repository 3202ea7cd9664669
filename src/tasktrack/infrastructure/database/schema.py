"""SQLAlchemy Core table definitions for the tasktrack database.

The whole application state is a single JSON blob, so the schema is one
key-value table. Keys are versioned (``tasktrack.v1``) by the caller.
"""

from __future__ import annotations

from sqlalchemy import Column, LargeBinary, MetaData, Table, Text

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", LargeBinary, nullable=False),
    Column("updated", Text, nullable=False),
)
