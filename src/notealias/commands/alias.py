"""Command group: manage document aliases.

Every subcommand resolves the target document first, then runs exactly
one AliasService operation. The local CLI is a single-user transport and
performs no ownership check of its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from notealias.commands._base import NoteAliasGroup

if TYPE_CHECKING:
    from notealias.commands._context import AppContext
    from notealias.services.result import ServiceResult


def _resolve_or_exit(app: AppContext, id_or_alias: str) -> str:
    """Resolve *id_or_alias* to a public ID, emitting the failure otherwise."""
    from notealias.services.lookup import LookupService

    result = LookupService(app.store).resolve(id_or_alias)
    if not result.ok:
        app.emit(result)
    return str(result.data["public_id"])


def _emit_view(app: AppContext, result: ServiceResult, name: str) -> None:
    """Emit *result* on failure, otherwise the view of alias *name*."""
    from notealias.services.alias import AliasService

    if not result.ok:
        app.emit(result)
        return
    app.emit(AliasService(app.store).to_alias_view(name, str(result.data["public_id"])))


@click.group(
    cls=NoteAliasGroup,
    examples="""\
  notealias alias add w5trddy3zc1tj9mzs7b8rbbvfc meeting-notes
  notealias alias primary standup
  notealias alias remove old-name
  notealias alias show meeting-notes""",
)
def alias() -> None:
    """Add, promote, remove, and inspect aliases."""


@alias.command(
    examples="""\
  notealias alias add w5trddy3zc1tj9mzs7b8rbbvfc meeting-notes
  notealias alias add meeting-notes standup""",
)
@click.argument("id_or_alias")
@click.argument("new_alias")
@click.pass_obj
def add(app: AppContext, id_or_alias: str, new_alias: str) -> None:
    """Add NEW_ALIAS to the document ID_OR_ALIAS points to."""
    from notealias.services.alias import AliasService

    public_id = _resolve_or_exit(app, id_or_alias)
    _emit_view(app, AliasService(app.store).add_alias(public_id, new_alias), new_alias)


@alias.command(
    examples="""\
  notealias alias primary standup""",
)
@click.argument("name")
@click.pass_obj
def primary(app: AppContext, name: str) -> None:
    """Make NAME the primary alias of its document."""
    from notealias.services.alias import AliasService

    public_id = _resolve_or_exit(app, name)
    _emit_view(app, AliasService(app.store).make_alias_primary(public_id, name), name)


@alias.command(
    examples="""\
  notealias alias remove old-name""",
)
@click.argument("name")
@click.pass_obj
def remove(app: AppContext, name: str) -> None:
    """Remove NAME from its document.

    A primary alias can only be removed while it is the document's only alias.
    """
    from notealias.services.alias import AliasService

    public_id = _resolve_or_exit(app, name)
    app.emit(AliasService(app.store).remove_alias(public_id, name))


@alias.command(
    examples="""\
  notealias alias show meeting-notes
  notealias --json alias show meeting-notes""",
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show NAME, whether it is primary, and its document's public ID."""
    from notealias.services.alias import AliasService

    app.emit(AliasService(app.store).to_alias_view(name))
