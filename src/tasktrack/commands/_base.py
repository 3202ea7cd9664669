"""Click base classes with an eager ``--examples`` flag.

``--help`` stays short; ``--examples`` prints copy-pasteable invocations
and exits.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds ``examples=`` to a Click command/group constructor."""

    params: list[click.Parameter]
    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class TrackCommand(_ExamplesMixin, click.Command):
    """Command that supports ``--examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class TrackGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`TrackCommand`."""

    command_class = TrackCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
