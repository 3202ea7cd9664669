"""Board query: a render-ready view of the model.

Read-only: builds a ServiceResult from the model's sorted accessors so any
front end (CLI, JSON consumers) gets categories in display order with their
tasks already sorted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tasktrack.services.result import ServiceResult

if TYPE_CHECKING:
    from tasktrack.services.model import StateModel


def board_snapshot(model: StateModel, *, hide_done: bool = False) -> ServiceResult:
    """Return ``op="show"`` with one entry per category.

    Collapsed categories keep their counts but list no tasks.
    """
    categories: list[dict[str, Any]] = []
    total_tasks = 0
    for category in model.get_categories():
        tasks = model.get_tasks_by_category(category.id)
        total_tasks += len(tasks)
        collapsed = model.is_collapsed(category.id)
        visible = [t for t in tasks if not (hide_done and t.done)]
        categories.append(
            {
                "id": category.id,
                "name": category.name,
                "collapsed": collapsed,
                "task_count": len(tasks),
                "done_count": sum(1 for t in tasks if t.done),
                "tasks": []
                if collapsed
                else [{"id": t.id, "title": t.title, "done": t.done} for t in visible],
            }
        )

    return ServiceResult.success(
        "show",
        {
            "categories": categories,
            "count": len(categories),
            "task_count": total_tasks,
        },
    )
