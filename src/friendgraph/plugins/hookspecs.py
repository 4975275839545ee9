"""Pluggy hook specifications for friendgraph lifecycle events.

Hooks fire after a mutation has been applied to the engine. They are
dispatched synchronously on the calling thread.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "friendgraph"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FriendgraphHookSpec:
    """Hook specifications for the friendgraph plugin system."""

    @hookspec
    def post_add_user(self, user_id: int, name: str) -> None:
        """Called after a user is added."""

    @hookspec
    def post_connect(self, source_id: int, target_id: int) -> None:
        """Called after a new friendship is created."""

    @hookspec
    def post_disconnect(self, source_id: int, target_id: int) -> None:
        """Called after a friendship is removed."""

    @hookspec
    def post_save(self, path: str, users: int) -> None:
        """Called after the data file is written."""

    @hookspec
    def post_import(self, path: str, users: int) -> None:
        """Called after users are imported from a file."""
