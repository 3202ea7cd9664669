"""PersistenceGateway: durable load/save, schema migration, change fan-out.

The gateway never keeps its own copy of the state: ``save`` serializes what
it is given and ``load`` rehydrates a fresh snapshot.

INVARIANT: Storage failures never propagate past the gateway. A failed read
falls back to an empty migrated state; a failed write is logged and
subscribers are not notified.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from tasktrack.domain.models import CURRENT_VERSION, AppState
from tasktrack.infrastructure.storage import StorageError

if TYPE_CHECKING:
    from tasktrack.infrastructure.storage import StorageMedium

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "tasktrack.v1"

Subscriber = Callable[[AppState], Any]
Unsubscribe = Callable[[], None]


def _collapse_flags(meta: Any) -> dict[str, bool]:
    """Boolean collapse flags from a raw ``meta``; anything else is dropped."""
    if not isinstance(meta, Mapping):
        return {}
    flags = meta.get("collapsedByCategoryId", meta.get("collapsed_by_category_id"))
    if not isinstance(flags, Mapping):
        return {}
    return {str(k): v for k, v in flags.items() if isinstance(v, bool)}


def migrate(raw: Any) -> AppState:
    """Normalize an arbitrary persisted value to the current schema.

    - Absent (``None``, empty, or not a mapping): fresh empty state.
    - ``meta`` is always rebuilt at the current version. Only boolean
      entries of ``collapsedByCategoryId`` are kept.

    Categories and tasks pass through untouched; entries that do not fit the
    models raise :class:`pydantic.ValidationError` rather than being dropped.
    """
    if isinstance(raw, AppState):
        return raw
    if not raw or not isinstance(raw, Mapping):
        return AppState()

    data = dict(raw)
    meta = data.get("meta")
    version = meta.get("version") if isinstance(meta, Mapping) else None
    if isinstance(version, bool) or version != CURRENT_VERSION:
        logger.info("Migrating state meta from version %r to %d", version, CURRENT_VERSION)
    data["meta"] = {
        "version": CURRENT_VERSION,
        "collapsedByCategoryId": _collapse_flags(meta),
    }
    return AppState.model_validate(data)


class PersistenceGateway:
    """Serialize the state blob to a storage medium and notify subscribers.

    Parameters:
        storage: Byte store the blob is written to.
        key: Fixed storage key of the blob.
    """

    def __init__(self, storage: StorageMedium, *, key: str = DEFAULT_STATE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._subscribers: list[Subscriber] = []

    @property
    def key(self) -> str:
        return self._key

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> AppState:
        """Read and migrate the persisted state. Never raises."""
        try:
            blob = self._storage.get(self._key)
        except StorageError as exc:
            logger.warning("StorageReadFailure key=%s: %s", self._key, exc)
            return migrate(None)

        if not blob:
            logger.debug("No persisted state under key=%s", self._key)
            return migrate(None)

        try:
            return migrate(json.loads(blob))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            logger.warning("StorageReadFailure key=%s: malformed payload: %s", self._key, exc)
            return migrate(None)

    def save(self, state: AppState) -> bool:
        """Write *state* durably, then notify subscribers in order.

        Returns False (and notifies nobody) when the write fails.
        """
        blob = state.model_dump_json(by_alias=True).encode("utf-8")
        try:
            self._storage.set(self._key, blob)
        except StorageError as exc:
            logger.error("StorageWriteFailure key=%s: %s", self._key, exc)
            return False

        logger.debug(
            "State saved key=%s categories=%d tasks=%d",
            self._key,
            len(state.categories),
            len(state.tasks),
        )
        self._notify(state)
        return True

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Register *callback* for future saves; returns its deregistration.

        Registering the same callback twice keeps a single entry.
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _notify(self, state: AppState) -> None:
        """Invoke every subscriber once. A failing subscriber never blocks the rest."""
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Subscriber %r failed", callback)
