"""Subcommand modules for notealias.

Provides register_commands() which uses deferred imports to keep
``notealias --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the alias group and the standalone commands on the root group."""
    from notealias.commands.alias import alias

    cli.add_command(alias)

    from notealias.commands.create import create
    from notealias.commands.resolve import resolve

    cli.add_command(create)
    cli.add_command(resolve)
