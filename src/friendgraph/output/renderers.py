"""Human-readable rendering of ServiceResult, one renderer per operation.

Renderers print into a throwaway Rich console from
:func:`friendgraph.output.console.create_console` and the text is read back
with :func:`~friendgraph.output.console.get_output`. ``_OP_RENDERERS`` maps
``result.op`` to its renderer; anything unmapped gets a key/value dump.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from friendgraph.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from friendgraph.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* for a terminal; colour is dropped when not a TTY."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose=verbose)
        if verbose and result.meta:
            _render_meta(console, result.meta)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Lists of users collapse to one ID per line; groups to one
    space-separated line of IDs per group.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "groups":
        return "\n".join(
            " ".join(str(m["id"]) for m in group.get("members", []))
            for group in result.data.get("groups", [])
        )

    members = result.data.get("items") or result.data.get("steps")
    if members and isinstance(members, list):
        return "\n".join(str(m["id"]) for m in members if isinstance(m, dict) and "id" in m)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """``OK  op`` header above a result's fields."""
    console.print(Text.assemble(("OK", "fg.ok"), "  ", (result.op, "fg.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="fg.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="fg.id")
    elif key in ("path", "source", "output_file"):
        v = Text(str(value), style="fg.path")
    elif key.endswith("name"):
        v = Text(str(value), style="fg.name")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _name(item: dict[str, Any]) -> str:
    """A user's name escaped for Rich markup."""
    return escape(str(item.get("name", "")))


def _chain(steps: list[dict[str, Any]]) -> str:
    """Format steps as ``id (name) → id (name)`` markup."""
    return " → ".join(
        f"[fg.id]{step.get('id', '?')}[/fg.id] ({_name(step)})" for step in steps
    )


def _member_table(
    items: list[dict[str, Any]],
    *,
    extra_columns: list[str] | None = None,
) -> Table:
    """Build a Rich Table of users (ID, name, plus any extra columns)."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="fg.id", no_wrap=True, justify="right")
    table.add_column("Name", style="fg.name")
    for col in extra_columns or []:
        style = "fg.score" if col == "score" else ""
        table.add_column(col.replace("_", " ").title(), style=style, justify="right")

    for item in items:
        row = [str(item.get("id", "")), str(item.get("name", ""))]
        row.extend(str(item.get(col, "")) for col in extra_columns or [])
        table.add_row(*row)
    return table


def _timing_style(duration_ms: float) -> str:
    if duration_ms > 1000:
        return "bold red"
    if duration_ms > 100:
        return "yellow"
    return "dim"


def _span_label(span: dict[str, Any]) -> str:
    duration = span.get("duration_ms", 0.0)
    style = _timing_style(duration)
    label = f"[{style}]{duration:.2f}ms[/{style}] {escape(str(span.get('name', '?')))}"
    annotations = span.get("annotations") or {}
    if annotations:
        label += " (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    return label


def _add_spans(branch: Tree, span: dict[str, Any]) -> None:
    node = branch.add(_span_label(span))
    for child in span.get("children", []):
        _add_spans(node, child)


def _render_meta(console: Console, meta: dict[str, Any]) -> None:
    """Verbose footer: plain meta keys, then the telemetry span tree."""
    console.print()
    tree = Tree(Text("meta", style="dim"), guide_style="dim")
    for key, value in meta.items():
        if key == "telemetry":
            _add_spans(tree, value)
        else:
            tree.add(Text(f"{key}: {value}"))
    console.print(tree)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """``ERROR  op — message``, plus the error detail under ``--verbose``."""
    error = result.error
    console.print(
        Text("ERROR", style="fg.error"),
        Text(f" {result.op}", style="fg.op"),
        Text(f" — {error.message if error else 'Unknown error'}"),
        sep="",
    )
    if verbose and error and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            console.print(f"    {key}: {value}", markup=False)


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add_user / connect / disconnect results."""
    _status_line(console, result)
    for key in ("id", "name", "year", "zip", "source_id", "target_id", "status", "path"):
        if key in result.data:
            _field(console, key, result.data[key])


# ── User renderers ────────────────────────────────────────────────────


def _render_user(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_user as a panel listing friends."""
    d = result.data
    lines = [f"year: {d.get('year')}", f"zip: {d.get('zip')}"]
    friends = d.get("friends", [])
    if friends:
        named = ", ".join(f"{f['name']} ({f['id']})" for f in friends)
        lines.append(f"friends ({len(friends)}): {named}")
    else:
        lines.append("friends: none")
    title = f"{d.get('id', '?')} — {d.get('name', '')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))


def _render_user_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_users as a table."""
    items = result.data.get("items", [])
    console.print(_member_table(items, extra_columns=["year", "zip", "friends"]))
    console.print(f"\n{result.data.get('count', len(items))} users")


# ── Query renderers ───────────────────────────────────────────────────


def _render_path(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render shortest path as a chain."""
    steps = result.data.get("steps", [])
    if not steps:
        console.print("No path found.")
        return
    console.print(_chain(steps))
    console.print(f"\nPath length: {result.data.get('length', len(steps) - 1)}")


def _render_distance(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the user found at an exact distance and the path to them."""
    distance = result.data.get("distance")
    found_id = result.data.get("found_id")
    if found_id is None:
        console.print(f"No user at distance {distance}.")
        return
    name = escape(str(result.data.get("found_name", "")))
    console.print(
        f"Found [fg.id]{found_id}[/fg.id] ([fg.name]{name}[/fg.name]) at distance {distance}"
    )
    console.print(_chain(result.data.get("steps", [])))


def _render_groups(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render connected components with their members."""
    groups = result.data.get("groups", [])
    console.print(f"[bold]{result.data.get('count', len(groups))} groups[/bold]")
    for group in groups:
        gid, size = group.get("group_id", "?"), group.get("size", 0)
        console.print(f"\n[bold]Group {gid}[/bold] ({size} users)")
        members = ", ".join(
            f"[fg.id]{m.get('id')}[/fg.id] {_name(m)}" for m in group.get("members", [])
        )
        console.print(f"  {members}")


def _render_suggest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render friend suggestions with their mutual-friend score."""
    items = result.data.get("items", [])
    name = result.data.get("name", "")
    if not items:
        console.print(f"No suggestions for {name}.")
        return
    console.print(_member_table(items, extra_columns=["score"]))
    console.print(f"\n{len(items)} suggestions for {name} (score {result.data.get('score', 0)})")


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render export/import summaries (content itself is never shown)."""
    _status_line(console, result)
    for key, value in result.data.items():
        if key != "content":
            _field(console, key, value)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Mutations
    "add_user": _render_mutation,
    "connect": _render_mutation,
    "disconnect": _render_mutation,
    # Users
    "get_user": _render_user,
    "list_users": _render_user_table,
    # Queries
    "path": _render_path,
    "distance": _render_distance,
    "groups": _render_groups,
    "suggest": _render_suggest,
    # Export / import
    "export_records": _render_export,
    "export_graph": _render_export,
    "import": _render_export,
}
