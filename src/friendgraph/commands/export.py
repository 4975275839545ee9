"""Command group: network export, plus the standalone ``import`` command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from friendgraph.commands._base import FgCommand, FgGroup
from friendgraph.services.export import GRAPH_FORMATS, RECORD_FORMATS, ExportService
from friendgraph.services.result import ServiceResult

if TYPE_CHECKING:
    from friendgraph.commands._context import AppContext

_EXPORT_EXAMPLES = """\
  friendgraph export records
  friendgraph export records --format json --output users.json
  friendgraph export graph --format dot
  friendgraph export graph --format json --output graph.json"""

_OUTPUT_OPTION = click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)


@click.group(cls=FgGroup, examples=_EXPORT_EXAMPLES)
@click.pass_obj
def export(app: AppContext) -> None:
    """Export the network in various formats."""


def _write_or_echo(
    app: AppContext,
    result: ServiceResult,
    output_file: str | None,
    summary_keys: tuple[str, ...],
) -> None:
    """Write exported content to *output_file* or print it raw to stdout."""
    if not result.ok:
        app.emit(result)
        return

    if output_file:
        out = Path(output_file)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.data["content"], encoding="utf-8")
        # Emit summary (without content) for the renderer
        app.emit(
            ServiceResult(
                ok=True,
                op=result.op,
                data={
                    "format": result.data["format"],
                    "output_file": output_file,
                    **{key: result.data[key] for key in summary_keys},
                },
                meta=result.meta,
            )
        )
    else:
        # Pipe-friendly: raw content to stdout
        click.echo(result.data["content"], nl=False)


@export.command(
    examples="""\
  friendgraph export records
  friendgraph export records --format json
  friendgraph export records --output backup.txt"""
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(RECORD_FORMATS), case_sensitive=False),
    default="text",
    help="Record output format.",
)
@_OUTPUT_OPTION
@click.pass_obj
def records(app: AppContext, fmt: str, output_file: str | None) -> None:
    """Export every user record as flat text or JSON."""
    result = ExportService(app.store).export_records(fmt=fmt)
    _write_or_echo(app, result, output_file, ("user_count",))


@export.command(
    examples="""\
  friendgraph export graph --format dot
  friendgraph export graph --format json --output graph.json
  friendgraph export graph --format dot | dot -Tpng -o graph.png"""
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(GRAPH_FORMATS), case_sensitive=False),
    default="dot",
    help="Graph output format.",
)
@_OUTPUT_OPTION
@click.pass_obj
def graph(app: AppContext, fmt: str, output_file: str | None) -> None:
    """Export the friendship graph in DOT or JSON format."""
    result = ExportService(app.store).export_graph(fmt=fmt)
    _write_or_echo(app, result, output_file, ("node_count", "edge_count"))


@click.command(
    "import",
    cls=FgCommand,
    examples="""\
  friendgraph import users.txt
  friendgraph --data network.txt import backup.txt""",
)
@click.argument("source", type=click.Path(dir_okay=False))
@click.pass_obj
def import_cmd(app: AppContext, source: str) -> None:
    """Replace the network with the users in a flat file."""
    app.emit(ExportService(app.store).import_records(Path(source)))
