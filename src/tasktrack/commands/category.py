"""Command group: category add/rename/remove/collapse/expand."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackGroup

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.group(
    cls=TrackGroup,
    examples="""\
  tasktrack category add "Chores"
  tasktrack category rename cat_lx2k9q0a_4f8z1c "Home chores"
  tasktrack category collapse cat_lx2k9q0a_4f8z1c
  tasktrack category remove cat_lx2k9q0a_4f8z1c --yes""",
)
def category() -> None:
    """Manage categories."""


@category.command()
@click.argument("name")
@click.pass_obj
def add(app: AppContext, name: str) -> None:
    """Create a category named NAME (2-40 characters, unique)."""
    app.emit(app.model.add_category(name))


@category.command()
@click.argument("category_id")
@click.argument("name")
@click.pass_obj
def rename(app: AppContext, category_id: str, name: str) -> None:
    """Rename category CATEGORY_ID to NAME."""
    app.emit(app.model.rename_category(category_id, name))


@category.command()
@click.argument("category_id")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def remove(app: AppContext, category_id: str, assume_yes: bool) -> None:
    """Delete category CATEGORY_ID and all of its tasks."""
    model = app.model
    found = model.get_state().find_category(category_id)
    if found is not None:
        count = len(model.get_tasks_by_category(category_id))
        prompt = f"Delete category {found.name!r} and its {count} task(s)?"
        if not app.confirm(prompt, assume_yes=assume_yes):
            click.echo("Aborted.", err=True)
            return
    app.emit(model.remove_category(category_id))


@category.command()
@click.argument("category_id")
@click.pass_obj
def collapse(app: AppContext, category_id: str) -> None:
    """Collapse category CATEGORY_ID on the board."""
    app.emit(app.model.set_collapsed(category_id, True))


@category.command()
@click.argument("category_id")
@click.pass_obj
def expand(app: AppContext, category_id: str) -> None:
    """Expand category CATEGORY_ID on the board."""
    app.emit(app.model.set_collapsed(category_id, False))
