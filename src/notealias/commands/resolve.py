"""Command: resolve a public ID or alias to its document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from notealias.commands._base import NoteAliasCommand

if TYPE_CHECKING:
    from notealias.commands._context import AppContext


@click.command(
    cls=NoteAliasCommand,
    examples="""\
  notealias resolve w5trddy3zc1tj9mzs7b8rbbvfc
  notealias resolve meeting-notes""",
)
@click.argument("id_or_alias")
@click.pass_obj
def resolve(app: AppContext, id_or_alias: str) -> None:
    """Show the document a public ID or alias points to."""
    from notealias.services.lookup import LookupService

    app.emit(LookupService(app.store).resolve(id_or_alias))
