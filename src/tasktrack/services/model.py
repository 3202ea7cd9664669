"""StateModel: canonical in-memory state, read queries, and commands.

Pipeline for every command: VALIDATE → BUILD NEW SNAPSHOT → SAVE → RESPOND.

The model never edits a snapshot in place. It swaps ``self._state`` for the
new value *before* handing it to the gateway, so subscribers that re-query
the model during notification see the saved state.

Commands that target a missing id are no-ops that still succeed. A command
whose result equals the current snapshot is not saved and reports
``changed: False``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from tasktrack.domain.ids import CATEGORY_PREFIX, TASK_PREFIX, uid
from tasktrack.domain.models import (
    AppState,
    Meta,
    Category,
    Task,
    sort_categories,
    sort_tasks,
)
from tasktrack.domain.validation import (
    Reason,
    ValidationOutcome,
    validate_category_name,
    validate_task_title,
)
from tasktrack.services._helpers import now_ms
from tasktrack.services.result import ServiceResult

if TYPE_CHECKING:
    from tasktrack.services.persistence import PersistenceGateway, Subscriber, Unsubscribe

logger = logging.getLogger(__name__)

NOT_SAVED_WARNING = "State not durably saved"


class StateModel:
    """Owns the current :class:`AppState` and every mutation of it.

    Parameters:
        gateway: Persistence gateway; the initial state comes from ``gateway.load()``.
        clock: Millisecond clock, injectable for deterministic tests.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._gateway = gateway
        self._clock = clock
        self._state = gateway.load()
        logger.debug(
            "StateModel ready categories=%d tasks=%d",
            len(self._state.categories),
            len(self._state.tasks),
        )

    # ------------------------------------------------------------------
    # Read queries
    # ------------------------------------------------------------------

    def get_state(self) -> AppState:
        return self._state

    def get_categories(self) -> list[Category]:
        """All categories in display order."""
        return sort_categories(self._state.categories)

    def get_tasks_by_category(self, category_id: str) -> list[Task]:
        """Tasks of one category: open first, then done, oldest first in each group."""
        return sort_tasks([t for t in self._state.tasks if t.category_id == category_id])

    def is_collapsed(self, category_id: str) -> bool:
        return bool(self._state.meta.collapsed_by_category_id.get(category_id, False))

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Register a callback fired after every persisted mutation."""
        return self._gateway.subscribe(callback)

    # ------------------------------------------------------------------
    # Category commands
    # ------------------------------------------------------------------

    def add_category(self, name: str) -> ServiceResult:
        op = "add_category"
        state = self._state
        outcome = validate_category_name(name, {c.name.lower() for c in state.categories})
        if not outcome.ok:
            return self._invalid(op, outcome)

        category = Category(
            id=uid(CATEGORY_PREFIX),
            name=outcome.value,
            created_at=self._clock(),
            order=self._next_order(),
        )
        next_state = state.model_copy(update={"categories": (*state.categories, category)})
        return self._commit(op, next_state, {"id": category.id, "name": category.name})

    def rename_category(self, category_id: str, name: str) -> ServiceResult:
        op = "rename_category"
        state = self._state
        others = {c.name.lower() for c in state.categories if c.id != category_id}
        outcome = validate_category_name(name, others)
        if not outcome.ok:
            return self._invalid(op, outcome, id=category_id)

        categories = tuple(
            c.model_copy(update={"name": outcome.value}) if c.id == category_id else c
            for c in state.categories
        )
        next_state = state.model_copy(update={"categories": categories})
        return self._commit(op, next_state, {"id": category_id, "name": outcome.value})

    def remove_category(self, category_id: str) -> ServiceResult:
        """Remove a category, its tasks, and its collapse flag."""
        state = self._state
        tasks = tuple(t for t in state.tasks if t.category_id != category_id)
        collapsed = {
            k: v for k, v in state.meta.collapsed_by_category_id.items() if k != category_id
        }
        next_state = state.model_copy(
            update={
                "categories": tuple(c for c in state.categories if c.id != category_id),
                "tasks": tasks,
                "meta": Meta(version=state.meta.version, collapsed_by_category_id=collapsed),
            }
        )
        return self._commit(
            "remove_category",
            next_state,
            {"id": category_id, "tasks_removed": len(state.tasks) - len(tasks)},
        )

    def set_collapsed(self, category_id: str, collapsed: bool) -> ServiceResult:
        """Set the collapse flag of an existing category.

        Unknown categories are ignored so no flag outlives its category.
        """
        op = "set_collapsed"
        state = self._state
        data = {"id": category_id, "collapsed": bool(collapsed)}
        if state.find_category(category_id) is None:
            return ServiceResult.success(op, {**data, "changed": False})

        flags = {**state.meta.collapsed_by_category_id, category_id: bool(collapsed)}
        meta = Meta(version=state.meta.version, collapsed_by_category_id=flags)
        next_state = state.model_copy(update={"meta": meta})
        return self._commit(op, next_state, data)

    # ------------------------------------------------------------------
    # Task commands
    # ------------------------------------------------------------------

    def add_task(self, category_id: str, title: str) -> ServiceResult:
        op = "add_task"
        state = self._state
        outcome = validate_task_title(title)
        if not outcome.ok:
            return self._invalid(op, outcome, category_id=category_id)
        if state.find_category(category_id) is None:
            return ServiceResult.failure(
                op,
                Reason.UNKNOWN_CATEGORY.value,
                f"No category with id {category_id!r}",
                category_id=category_id,
            )

        now = self._clock()
        task = Task(
            id=uid(TASK_PREFIX),
            category_id=category_id,
            title=outcome.value,
            done=False,
            created_at=now,
            updated_at=now,
        )
        next_state = state.model_copy(update={"tasks": (*state.tasks, task)})
        return self._commit(
            op, next_state, {"id": task.id, "category_id": category_id, "title": task.title}
        )

    def toggle_task(self, task_id: str) -> ServiceResult:
        op = "toggle_task"
        task = self._state.find_task(task_id)
        if task is None:
            return ServiceResult.success(op, {"id": task_id, "changed": False})

        updated = task.model_copy(update={"done": not task.done, "updated_at": self._touch(task)})
        return self._commit(op, self._replace_task(updated), {"id": task_id, "done": updated.done})

    def rename_task(self, task_id: str, title: str) -> ServiceResult:
        op = "rename_task"
        outcome = validate_task_title(title)
        if not outcome.ok:
            return self._invalid(op, outcome, id=task_id)

        task = self._state.find_task(task_id)
        data = {"id": task_id, "title": outcome.value}
        if task is None or task.title == outcome.value:
            return ServiceResult.success(op, {**data, "changed": False})

        updated = task.model_copy(update={"title": outcome.value, "updated_at": self._touch(task)})
        return self._commit(op, self._replace_task(updated), data)

    def remove_task(self, task_id: str) -> ServiceResult:
        state = self._state
        next_state = state.model_copy(
            update={"tasks": tuple(t for t in state.tasks if t.id != task_id)}
        )
        return self._commit("remove_task", next_state, {"id": task_id})

    # ------------------------------------------------------------------
    # Whole-state commands
    # ------------------------------------------------------------------

    def reset(self) -> ServiceResult:
        """Wipe every category, task, and flag."""
        state = self._state
        return self._commit(
            "reset",
            AppState(),
            {
                "categories_removed": len(state.categories),
                "tasks_removed": len(state.tasks),
            },
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _commit(self, op: str, next_state: AppState, data: dict[str, Any]) -> ServiceResult:
        if next_state == self._state:
            return ServiceResult.success(op, {**data, "changed": False})

        self._state = next_state
        warnings: list[str] = []
        if self._gateway.save(next_state):
            logger.debug("Committed %s %s", op, data)
        else:
            logger.debug("Applied %s in memory only, save failed: %s", op, data)
            warnings.append(NOT_SAVED_WARNING)
        return ServiceResult.success(op, {**data, "changed": True}, warnings=warnings)

    @staticmethod
    def _invalid(op: str, outcome: ValidationOutcome, **detail: Any) -> ServiceResult:
        assert outcome.reason is not None
        return ServiceResult.failure(op, outcome.reason.value, outcome.message, **detail)

    def _next_order(self) -> int:
        return max((c.order for c in self._state.categories), default=-1) + 1

    def _touch(self, task: Task) -> int:
        """A fresh ``updated_at`` that is strictly newer than the previous one."""
        return max(self._clock(), task.updated_at + 1)

    def _replace_task(self, updated: Task) -> AppState:
        state = self._state
        tasks = tuple(updated if t.id == updated.id else t for t in state.tasks)
        return state.model_copy(update={"tasks": tasks})
