"""NetworkService — user management, connections, and graph queries.

Users are addressed by name at this boundary and resolved to IDs through
the engine's first-match lookup. Query results carry both the ID and the
name of every user they mention.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from friendgraph.domain.errors import DuplicateNameError, InvalidArgumentError
from friendgraph.domain.records import is_single_line
from friendgraph.domain.types import ErrorCode
from friendgraph.services.base import BaseService
from friendgraph.services.observers import LoggingObserver
from friendgraph.services.result import ServiceResult
from friendgraph.services.telemetry import trace_span, traced


class NetworkService(BaseService):
    """Handles users, friendships, and traversal queries."""

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _member(self, user_id: int) -> dict[str, Any]:
        user = self._engine.get_user(user_id)
        return {"id": user_id, "name": user.name if user else ""}

    def _members(self, user_ids: list[int]) -> list[dict[str, Any]]:
        return [self._member(uid) for uid in user_ids]

    def _resolve_pair(self, op: str, name_a: str, name_b: str) -> tuple[int, int] | ServiceResult:
        missing = [n for n in (name_a, name_b) if self._engine.get_id(n) is None]
        if missing:
            return ServiceResult.fail(
                op,
                ErrorCode.NOT_FOUND,
                f"User not found: {', '.join(missing)}",
                missing=missing,
            )
        id_a, id_b = self._engine.get_id(name_a), self._engine.get_id(name_b)
        assert id_a is not None and id_b is not None
        return id_a, id_b

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @traced
    def add_user(self, name: str, year: int, zip_code: int) -> ServiceResult:
        """Add a friendless user; the next free ID is allocated."""
        op = "add_user"
        if (failure := self._load_failure(op)) is not None:
            return failure
        name = name.strip()
        if not name or not is_single_line(name):
            return ServiceResult.fail(
                op, ErrorCode.INVALID_ARGUMENT, "User name must be a non-empty single line"
            )

        try:
            user = self._engine.create_user(name, year, zip_code)
        except DuplicateNameError as exc:
            return ServiceResult.fail(op, ErrorCode.DUPLICATE_NAME, str(exc), name=name)
        except InvalidArgumentError as exc:
            return ServiceResult.fail(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        warnings: list[str] = []
        self._dispatch_event("post_add_user", {"user_id": user.id, "name": user.name}, warnings)
        path = self._persist(warnings)
        data: dict[str, Any] = {
            "id": user.id,
            "name": user.name,
            "year": user.year,
            "zip": user.zip,
        }
        if path:
            data["path"] = path
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def get_user(self, name: str) -> ServiceResult:
        """Return one user's record with named friends."""
        op = "get_user"
        if (failure := self._load_failure(op)) is not None:
            return failure
        resolved = self._resolve(op, name)
        if isinstance(resolved, ServiceResult):
            return resolved
        user = self._engine.get_user(resolved)
        assert user is not None
        friends = self._members(sorted(user.friends))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": user.id,
                "name": user.name,
                "year": user.year,
                "zip": user.zip,
                "count": len(friends),
                "friends": friends,
            },
        )

    @traced
    def list_users(self) -> ServiceResult:
        """List every user in ID order with their friend count."""
        op = "list_users"
        if (failure := self._load_failure(op)) is not None:
            return failure
        items = [
            {
                "id": u.id,
                "name": u.name,
                "year": u.year,
                "zip": u.zip,
                "friends": len(u.friends),
            }
            for u in self._engine.users
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    @traced
    def connect(self, name_a: str, name_b: str) -> ServiceResult:
        """Make two users friends.

        An existing friendship is not an error: the result is ok with
        ``status == "already_connected"`` and a warning.
        """
        op = "connect"
        if (failure := self._load_failure(op)) is not None:
            return failure
        if name_a == name_b:
            return ServiceResult.fail(
                op, ErrorCode.REJECTED, f"Cannot connect {name_a} to themselves"
            )
        resolved = self._resolve_pair(op, name_a, name_b)
        if isinstance(resolved, ServiceResult):
            return resolved
        id_a, id_b = resolved

        outcome = self._engine.connect(name_a, name_b)
        data = {"source_id": id_a, "target_id": id_b, "status": outcome.value}
        if not outcome.changed:
            return ServiceResult(
                ok=True,
                op=op,
                data=data,
                warnings=[f"{name_a} and {name_b} are already friends"],
            )

        warnings: list[str] = []
        self._dispatch_event("post_connect", {"source_id": id_a, "target_id": id_b}, warnings)
        self._persist(warnings)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def disconnect(self, name_a: str, name_b: str) -> ServiceResult:
        """Remove a friendship. A missing friendship is NOT_FOUND."""
        op = "disconnect"
        if (failure := self._load_failure(op)) is not None:
            return failure
        if name_a == name_b:
            return ServiceResult.fail(
                op, ErrorCode.REJECTED, f"Cannot disconnect {name_a} from themselves"
            )
        resolved = self._resolve_pair(op, name_a, name_b)
        if isinstance(resolved, ServiceResult):
            return resolved
        id_a, id_b = resolved

        outcome = self._engine.disconnect(name_a, name_b)
        if not outcome.changed:
            return ServiceResult.fail(
                op,
                ErrorCode.NOT_FOUND,
                f"No connection between {name_a} and {name_b}",
                reason=outcome.value,
            )

        warnings: list[str] = []
        self._dispatch_event("post_disconnect", {"source_id": id_a, "target_id": id_b}, warnings)
        self._persist(warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"source_id": id_a, "target_id": id_b, "status": outcome.value},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # path: BFS shortest path
    # ------------------------------------------------------------------

    @traced
    def path(self, source: str, target: str) -> ServiceResult:
        """Find the shortest friendship chain between two users."""
        op = "path"
        if (failure := self._load_failure(op)) is not None:
            return failure
        resolved = self._resolve_pair(op, source, target)
        if isinstance(resolved, ServiceResult):
            return resolved
        source_id, target_id = resolved

        with trace_span("bfs"):
            node_path = self._engine.shortest_path(
                source_id, target_id, observer=LoggingObserver(op)
            )
        if not node_path:
            return ServiceResult.fail(
                op,
                ErrorCode.NO_PATH,
                f"No path between {source} and {target}",
                source_id=source_id,
                target_id=target_id,
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source_id": source_id,
                "target_id": target_id,
                "length": len(node_path) - 1,
                "steps": self._members(node_path),
            },
        )

    # ------------------------------------------------------------------
    # distance: first user at an exact hop count
    # ------------------------------------------------------------------

    @traced
    def distance(self, name: str, distance: int) -> ServiceResult:
        """Find the first user exactly *distance* hops away from *name*.

        Nothing at that distance is still a successful query: ``found_id``
        is None and ``steps`` is empty.
        """
        op = "distance"
        if (failure := self._load_failure(op)) is not None:
            return failure
        max_distance = self._store.settings.query.max_distance
        if distance < 0 or distance > max_distance:
            return ServiceResult.fail(
                op,
                ErrorCode.INVALID_ARGUMENT,
                f"Distance must be between 0 and {max_distance}, got {distance}",
                distance=distance,
            )
        resolved = self._resolve(op, name)
        if isinstance(resolved, ServiceResult):
            return resolved

        with trace_span("bfs"):
            match = self._engine.distance_user(resolved, distance, observer=LoggingObserver(op))

        found_name = None
        if match.found_id is not None:
            found_name = self._member(match.found_id)["name"]
        data: dict[str, Any] = {
            "source_id": resolved,
            "distance": distance,
            "found_id": match.found_id,
            "found_name": found_name,
            "steps": self._members(match.path),
        }
        warnings = [] if match.found_id is not None else [f"No user at distance {distance}"]
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # groups: connected components
    # ------------------------------------------------------------------

    @traced
    def groups(self) -> ServiceResult:
        """Partition users into connected components."""
        op = "groups"
        if (failure := self._load_failure(op)) is not None:
            return failure
        with trace_span("dfs") as span:
            components = self._engine.groups()
            if span:
                span.annotate("components", len(components))

        groups = [
            {"group_id": index, "size": len(members), "members": self._members(members)}
            for index, members in enumerate(components)
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(groups), "groups": groups})

    # ------------------------------------------------------------------
    # suggest: common-neighbour scoring
    # ------------------------------------------------------------------

    @traced
    def suggest(self, name: str) -> ServiceResult:
        """Suggest friends sharing the most mutual friends with *name*."""
        op = "suggest"
        if (failure := self._load_failure(op)) is not None:
            return failure
        resolved = self._resolve(op, name)
        if isinstance(resolved, ServiceResult):
            return resolved

        suggestions = self._engine.suggest_friends(resolved)
        items = [{**m, "score": suggestions.score} for m in self._members(suggestions.ids)]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "user_id": resolved,
                "name": name,
                "score": suggestions.score,
                "count": len(items),
                "items": items,
            },
        )

    # ------------------------------------------------------------------
    # stats: summary via the NetworkX view
    # ------------------------------------------------------------------

    @traced
    def stats(self) -> ServiceResult:
        """Summarize size, density, and connectivity of the network."""
        op = "stats"
        if (failure := self._load_failure(op)) is not None:
            return failure
        g = self._engine.graph
        users = g.number_of_nodes()
        if users == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "users": 0,
                    "connections": 0,
                    "components": 0,
                    "isolated": 0,
                    "density": 0.0,
                },
            )

        degrees = [d for _, d in g.degree()]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "users": users,
                "connections": g.number_of_edges(),
                "components": nx.number_connected_components(g),
                "isolated": nx.number_of_isolates(g),
                "density": round(nx.density(g), 6),
                "average_degree": round(sum(degrees) / users, 4),
                "max_degree": max(degrees),
            },
        )
