"""State models: the persisted aggregate and its entities.

Python attributes are snake_case; the persisted JSON uses the camelCase
aliases (``createdAt``, ``categoryId``, ``collapsedByCategoryId``). Dump with
``by_alias=True`` for storage, validate with either spelling.

All models are frozen and collections are tuples: a snapshot is replaced
wholesale on every mutation, never edited in place. The collapse flags are
held in a read-only mapping for the same reason.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field, field_serializer

CURRENT_VERSION = 1

_MODEL_CONFIG: Any = {"frozen": True, "populate_by_name": True}

ReadOnlyFlags = Annotated[Mapping[str, bool], AfterValidator(MappingProxyType)]


class Category(BaseModel):
    """A named group of tasks."""

    model_config = _MODEL_CONFIG

    id: str
    name: str
    created_at: int = Field(alias="createdAt")
    order: int


class Task(BaseModel):
    """A single task bound to one category."""

    model_config = _MODEL_CONFIG

    id: str
    category_id: str = Field(alias="categoryId")
    title: str
    done: bool = False
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")


class Meta(BaseModel):
    """Schema version and UI-facing per-category flags."""

    model_config = _MODEL_CONFIG

    version: int = CURRENT_VERSION
    collapsed_by_category_id: ReadOnlyFlags = Field(
        default_factory=dict, alias="collapsedByCategoryId", validate_default=True
    )

    @field_serializer("collapsed_by_category_id")
    def _dump_flags(self, flags: Mapping[str, bool]) -> dict[str, bool]:
        return dict(flags)


class AppState(BaseModel):
    """Root aggregate: everything that is persisted."""

    model_config = _MODEL_CONFIG

    meta: Meta = Field(default_factory=Meta)
    categories: tuple[Category, ...] = ()
    tasks: tuple[Task, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict in the persisted (camelCase) layout."""
        return self.model_dump(mode="json", by_alias=True)

    def find_category(self, category_id: str) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)

    def find_task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)


# ---------------------------------------------------------------------------
# Display ordering
# ---------------------------------------------------------------------------


def sort_categories(categories: tuple[Category, ...] | list[Category]) -> list[Category]:
    """Categories by ``order`` ascending, ties broken by ``created_at``."""
    return sorted(categories, key=lambda c: (c.order, c.created_at))


def sort_tasks(tasks: tuple[Task, ...] | list[Task]) -> list[Task]:
    """Open tasks first, then done tasks; each group oldest first."""
    return sorted(tasks, key=lambda t: (t.done, t.created_at))
