"""Subcommand modules for tasktrack.

Provides register_commands() which uses deferred imports to keep
``tasktrack --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from tasktrack.commands.category import category
    from tasktrack.commands.task import task

    cli.add_command(category)
    cli.add_command(task)

    # --- Standalone commands ---
    from tasktrack.commands.reset import reset
    from tasktrack.commands.show import show

    cli.add_command(show)
    cli.add_command(reset)
