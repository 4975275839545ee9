"""Standalone commands: connect and disconnect users."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from friendgraph.commands._base import FgCommand
from friendgraph.services.network import NetworkService

if TYPE_CHECKING:
    from friendgraph.commands._context import AppContext


@click.command(
    cls=FgCommand,
    examples="""\
  friendgraph connect Alice Bob
  friendgraph --json connect Alice Carol""",
)
@click.argument("name_a")
@click.argument("name_b")
@click.pass_obj
def connect(app: AppContext, name_a: str, name_b: str) -> None:
    """Make two users friends."""
    app.emit(NetworkService(app.store).connect(name_a, name_b))


@click.command(
    cls=FgCommand,
    examples="""\
  friendgraph disconnect Alice Bob
  friendgraph --json disconnect Alice Carol""",
)
@click.argument("name_a")
@click.argument("name_b")
@click.pass_obj
def disconnect(app: AppContext, name_a: str, name_b: str) -> None:
    """Remove the friendship between two users."""
    app.emit(NetworkService(app.store).disconnect(name_a, name_b))
