"""Command group: task add/toggle/rename/remove."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackGroup

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.group(
    cls=TrackGroup,
    examples="""\
  tasktrack task add cat_lx2k9q0a_4f8z1c "Wash dishes"
  tasktrack task toggle task_lx2kb1d3_9qk2m0
  tasktrack task rename task_lx2kb1d3_9qk2m0 "Wash all dishes"
  tasktrack task remove task_lx2kb1d3_9qk2m0""",
)
def task() -> None:
    """Manage tasks."""


@task.command()
@click.argument("category_id")
@click.argument("title")
@click.pass_obj
def add(app: AppContext, category_id: str, title: str) -> None:
    """Add a task titled TITLE (2-140 characters) to CATEGORY_ID."""
    app.emit(app.model.add_task(category_id, title))


@task.command()
@click.argument("task_id")
@click.pass_obj
def toggle(app: AppContext, task_id: str) -> None:
    """Flip TASK_ID between open and done."""
    app.emit(app.model.toggle_task(task_id))


@task.command()
@click.argument("task_id")
@click.argument("title")
@click.pass_obj
def rename(app: AppContext, task_id: str, title: str) -> None:
    """Change the title of TASK_ID."""
    app.emit(app.model.rename_task(task_id, title))


@task.command()
@click.argument("task_id")
@click.pass_obj
def remove(app: AppContext, task_id: str) -> None:
    """Delete TASK_ID."""
    app.emit(app.model.remove_task(task_id))
