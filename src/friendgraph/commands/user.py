"""Command group: user management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from friendgraph.commands._base import FgGroup
from friendgraph.services.network import NetworkService

if TYPE_CHECKING:
    from friendgraph.commands._context import AppContext

_USER_EXAMPLES = """\
  friendgraph user add Alice --year 1990 --zip 10001
  friendgraph user show Alice
  friendgraph user list
  friendgraph --json user list"""


@click.group(cls=FgGroup, examples=_USER_EXAMPLES)
@click.pass_obj
def user(app: AppContext) -> None:
    """Add and inspect users."""


@user.command(
    examples="""\
  friendgraph user add Alice --year 1990 --zip 10001
  friendgraph --data team.txt user add Bob --year 1985 --zip 94110"""
)
@click.argument("name")
@click.option("--year", required=True, type=int, help="Birth year.")
@click.option("--zip", "zip_code", required=True, type=int, help="Zip code.")
@click.pass_obj
def add(app: AppContext, name: str, year: int, zip_code: int) -> None:
    """Add a user with no friends; the next free ID is assigned."""
    app.emit(NetworkService(app.store).add_user(name, year, zip_code))


@user.command(
    examples="""\
  friendgraph user show Alice
  friendgraph --json user show Alice"""
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show a user's record and friends."""
    app.emit(NetworkService(app.store).get_user(name))


@user.command(
    "list",
    examples="""\
  friendgraph user list
  friendgraph -q user list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every user in ID order."""
    app.emit(NetworkService(app.store).list_users())
