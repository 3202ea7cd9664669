"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the storage → gateway → model chain lazily so
``--help`` and ``--version`` never touch the database, and centralizes
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.config.logging import configure_logging
from tasktrack.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from tasktrack.config.settings import TaskTrackSettings
    from tasktrack.infrastructure.storage import StorageMedium
    from tasktrack.services.model import StateModel
    from tasktrack.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: TaskTrackSettings) -> None:
        self.settings = settings
        self._storage: StorageMedium | None = None
        self._model: StateModel | None = None
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
            show_ids=settings.display.show_ids,
        )

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def model(self) -> StateModel:
        """The state model (storage opened and state loaded on first access)."""
        if self._model is None:
            from tasktrack.infrastructure.storage import create_storage
            from tasktrack.services.model import StateModel
            from tasktrack.services.persistence import PersistenceGateway

            self._storage = create_storage(self.settings)
            gateway = PersistenceGateway(self._storage, key=self.settings.storage.key)
            self._model = StateModel(gateway)
        return self._model

    def close(self) -> None:
        """Release the storage medium, if one was opened."""
        if self._storage is not None:
            self._storage.close()
            self._storage = None
        self._model = None

    def confirm(self, prompt: str, *, assume_yes: bool = False) -> bool:
        """Ask for confirmation unless ``--yes`` or ``--no-interact`` was given."""
        if assume_yes or self.settings.no_interact:
            return True
        return click.confirm(prompt, default=False)

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Success goes to stdout (warnings to stderr unless JSON carries them).
        Failure goes to stderr and exits 1.
        """
        rendered = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(rendered, err=True)
            raise SystemExit(1)

        click.echo(rendered)
        if not self.output.json_output:
            for warning in result.warnings:
                click.secho(f"WARNING: {warning}", err=True, fg="yellow")
