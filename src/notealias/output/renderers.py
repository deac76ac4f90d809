"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from notealias.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from notealias.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: the identifier only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if result.op == "alias_view":
        return str(result.data.get("name", ""))
    if "public_id" in result.data:
        return str(result.data["public_id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="na.ok"), Text(f"  {result.op}", style="na.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="na.key")
    style = "na.id" if key == "public_id" else ""
    console.print(k, Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Renderers ─────────────────────────────────────────────────────────


def _render_document(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "public_id", data.get("public_id", ""))
    _field(console, "primary_alias", data.get("primary_alias") or "-")

    aliases: list[dict[str, Any]] = data.get("aliases", [])
    if aliases:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Alias", style="na.alias", no_wrap=True)
        table.add_column("Primary", style="na.primary")
        for item in aliases:
            table.add_row(str(item["name"]), "yes" if item["primary"] else "")
        console.print(table)
    else:
        console.print(Text("  no aliases", style="dim"))

    if verbose:
        _field(console, "version", data.get("version", ""))
        _field(console, "created", data.get("created", ""))
        _field(console, "modified", data.get("modified", ""))
        _render_meta(console, result)


def _render_alias_view(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "name", data.get("name", ""))
    _field(console, "primary", "yes" if data.get("primary") else "no")
    _field(console, "public_id", data.get("public_id", ""))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="na.error"),
        Text(f"  {result.op}", style="na.op"),
        Text(f"  {msg}"),
        sep="",
    )
    if err is not None:
        console.print(Text(f"  code: {err.code}", style="na.key"))
        if verbose:
            for key, value in err.detail.items():
                console.print(Text(f"  {key}: {value}", style="na.key"))


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "create_document": _render_document,
    "resolve": _render_document,
    "add_alias": _render_document,
    "remove_alias": _render_document,
    "make_alias_primary": _render_document,
    "alias_view": _render_alias_view,
}
