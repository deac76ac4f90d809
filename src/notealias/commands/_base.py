"""Click classes that give every notealias command an ``--examples`` flag.

Help text describes arguments; ``--examples`` prints a few ready-to-paste
invocations and exits before any argument is validated or the store is
opened.
"""

from __future__ import annotations

from typing import Any

import click


def _examples_option(examples: str) -> click.Option:
    """Build the eager flag that prints *examples* for the invoked command."""

    def _print_examples(ctx: click.Context, _param: click.Parameter, requested: bool) -> None:
        if requested:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_print_examples,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    """Stores ``examples`` and appends the flag when there are any."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class NoteAliasCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class NoteAliasGroup(_ExamplesMixin, click.Group):
    """Group whose ``@group.command`` subcommands are :class:`NoteAliasCommand`."""

    command_class = NoteAliasCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
