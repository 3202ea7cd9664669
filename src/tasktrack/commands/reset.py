"""Command: wipe all categories and tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackCommand

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.command(
    cls=TrackCommand,
    examples="""\
  tasktrack reset
  tasktrack reset --yes
  tasktrack --no-interact reset""",
)
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def reset(app: AppContext, assume_yes: bool) -> None:
    """Delete every category and task."""
    if not app.confirm("Delete ALL categories and tasks?", assume_yes=assume_yes):
        click.echo("Aborted.", err=True)
        return
    app.emit(app.model.reset())
