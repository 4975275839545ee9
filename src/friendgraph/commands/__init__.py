"""CLI command modules.

Commands are imported inside :func:`register_commands` so that importing
:mod:`friendgraph.cli` stays cheap until the root group is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every group and standalone command to the root *cli* group."""
    from friendgraph.commands.connect import connect, disconnect
    from friendgraph.commands.export import export, import_cmd
    from friendgraph.commands.graph import graph
    from friendgraph.commands.user import user

    for command in (user, connect, disconnect, graph, export, import_cmd):
        cli.add_command(command)
