"""Command: create a document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from notealias.commands._base import NoteAliasCommand

if TYPE_CHECKING:
    from notealias.commands._context import AppContext


@click.command(
    cls=NoteAliasCommand,
    examples="""\
  notealias create
  notealias create --alias meeting-notes
  notealias --json create --alias roadmap""",
)
@click.option("--alias", "alias_name", default=None, help="Initial alias (becomes primary).")
@click.pass_obj
def create(app: AppContext, alias_name: str | None) -> None:
    """Create a document with a fresh public ID."""
    from notealias.services.create import CreateService

    app.emit(CreateService(app.store).create_document(alias_name))
