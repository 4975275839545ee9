"""Click command classes carrying an ``--examples`` flag.

Usage examples live next to each command definition and are printed on
request instead of bloating ``--help``.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds an eager ``--examples`` option when examples text is supplied."""

    params: list[click.Parameter]

    def _install_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._print_examples,
                help="Show usage examples.",
            )
        )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class FgCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=`` in its decorator."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class FgGroup(_ExamplesMixin, click.Group):
    """Group accepting ``examples=``; its subcommands default to :class:`FgCommand`."""

    command_class = FgCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)
