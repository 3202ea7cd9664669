"""Command: render the board."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackCommand

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.command(
    cls=TrackCommand,
    examples="""\
  tasktrack show
  tasktrack show --hide-done
  tasktrack --json show""",
)
@click.option(
    "--hide-done/--show-done",
    default=None,
    help="Hide completed tasks (default from [display] hide_done).",
)
@click.pass_obj
def show(app: AppContext, hide_done: bool | None) -> None:
    """Show every category with its tasks, open tasks first."""
    from tasktrack.services.board import board_snapshot

    if hide_done is None:
        hide_done = app.settings.display.hide_done
    app.emit(board_snapshot(app.model, hide_done=hide_done))
