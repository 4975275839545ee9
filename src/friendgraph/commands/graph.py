"""Command group: graph traversal and analysis."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from friendgraph.commands._base import FgGroup
from friendgraph.services.network import NetworkService

if TYPE_CHECKING:
    from friendgraph.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  friendgraph graph path Alice Dave
  friendgraph graph distance Alice 2
  friendgraph graph groups
  friendgraph graph suggest Alice
  friendgraph graph stats"""


@click.group(cls=FgGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Traverse and analyze the friendship graph."""


@graph.command(
    examples="""\
  friendgraph graph path Alice Dave
  friendgraph -q graph path Alice Dave
  friendgraph --json graph path Alice Dave"""
)
@click.argument("source")
@click.argument("target")
@click.pass_obj
def path(app: AppContext, source: str, target: str) -> None:
    """Find the shortest friendship chain between two users."""
    app.emit(NetworkService(app.store).path(source, target))


@graph.command(
    examples="""\
  friendgraph graph distance Alice 2
  friendgraph --json graph distance Alice 3"""
)
@click.argument("name")
@click.argument("hops", type=int)
@click.pass_obj
def distance(app: AppContext, name: str, hops: int) -> None:
    """Find the first user exactly HOPS friendships away from NAME."""
    app.emit(NetworkService(app.store).distance(name, hops))


@graph.command(
    examples="""\
  friendgraph graph groups
  friendgraph -q graph groups"""
)
@click.pass_obj
def groups(app: AppContext) -> None:
    """Partition users into connected groups."""
    app.emit(NetworkService(app.store).groups())


@graph.command(
    examples="""\
  friendgraph graph suggest Alice
  friendgraph --json graph suggest Alice"""
)
@click.argument("name")
@click.pass_obj
def suggest(app: AppContext, name: str) -> None:
    """Suggest friends sharing the most mutual friends."""
    app.emit(NetworkService(app.store).suggest(name))


@graph.command(
    examples="""\
  friendgraph graph stats
  friendgraph --json graph stats"""
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Summarize size and connectivity of the network."""
    app.emit(NetworkService(app.store).stats())
