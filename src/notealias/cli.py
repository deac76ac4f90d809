"""``notealias`` entry point.

Global flags are folded into :class:`NoteAliasSettings` once, on the root
group, and reach subcommands through the shared :class:`AppContext`.
"""

from __future__ import annotations

import click

from notealias import __version__
from notealias.commands import register_commands
from notealias.commands._context import AppContext
from notealias.config.settings import NoteAliasSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="notealias")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the public ID or alias name.")
@click.option("-v", "--verbose", is_flag=True, help="Show versions, metadata and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this notealias.toml.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Manage public IDs and aliases of note documents."""
    ctx.obj = AppContext(
        NoteAliasSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
