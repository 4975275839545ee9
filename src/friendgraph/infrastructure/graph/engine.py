"""NetworkEngine — owning collection of users plus traversal algorithms.

Users live in a single list; a user's position is its permanent ID and IDs
are only ever allocated by append. Friendship is undirected and stored as a
symmetric pair of adjacency-set entries.

Traversals run directly over the adjacency sets, expanding neighbours in
ascending ID order so that "first match" results are deterministic. A
NetworkX view is built lazily for exports and summary statistics and is
dropped on every mutation.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple, Protocol

import networkx as nx

from friendgraph.domain.errors import DuplicateNameError, InvalidArgumentError
from friendgraph.domain.types import ConnectOutcome, DisconnectOutcome
from friendgraph.domain.user import User, UserRecord

logger = logging.getLogger(__name__)


class TraversalObserver(Protocol):
    """Optional hook receiving traversal progress from BFS queries."""

    def visit(self, node: int, depth: int) -> None:
        """Called when *node* is taken off the BFS frontier."""

    def discover(self, node: int, depth: int, parent: int) -> None:
        """Called when *node* is first reached from *parent*."""


class DistanceMatch(NamedTuple):
    """Outcome of an exact-distance lookup. ``found_id`` is None when nothing matched."""

    found_id: int | None
    path: list[int]


class Suggestions(NamedTuple):
    """Friend suggestions sharing the highest mutual-friend count."""

    score: int
    ids: list[int]


def _walk_back(predecessor: dict[int, int], target: int) -> list[int]:
    """Rebuild a source-to-target path from a predecessor map."""
    path = [target]
    while path[-1] in predecessor:
        path.append(predecessor[path[-1]])
    path.reverse()
    return path


class NetworkEngine:
    """In-memory social graph addressed by dense integer IDs.

    Args:
        unique_names: Reject users whose name is already present. When
            False, name lookups resolve to the first match by ID.
    """

    def __init__(self, *, unique_names: bool = False) -> None:
        self._users: list[User] = []
        self._unique_names = unique_names
        self._graph: nx.Graph[int] | None = None

    @classmethod
    def from_records(
        cls,
        records: Iterable[UserRecord],
        *,
        unique_names: bool = False,
    ) -> NetworkEngine:
        """Build a fresh engine from bulk-load records."""
        engine = cls(unique_names=unique_names)
        engine.load_records(records)
        return engine

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def users(self) -> tuple[User, ...]:
        """Read-only view of all users in ID order."""
        return tuple(self._users)

    def num_users(self) -> int:
        return len(self._users)

    def is_valid_id(self, user_id: int) -> bool:
        return 0 <= user_id < len(self._users)

    def get_user(self, user_id: int) -> User | None:
        """Return the user with *user_id*, or None if out of range."""
        if self.is_valid_id(user_id):
            return self._users[user_id]
        return None

    def get_id(self, name: str) -> int | None:
        """Resolve *name* by exact match; the lowest ID wins on duplicates."""
        for user in self._users:
            if user.name == name:
                return user.id
        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_user(self, user: User | None) -> None:
        """Append *user* to the network.

        Raises:
            InvalidArgumentError: *user* is None, or its ID is not the next
                free position.
            DuplicateNameError: Names are unique and *user.name* is taken.
        """
        if user is None:
            raise InvalidArgumentError("user must not be None")
        if user.id != len(self._users):
            raise InvalidArgumentError(
                f"user id {user.id} does not match next position {len(self._users)}"
            )
        if self._unique_names and self.get_id(user.name) is not None:
            raise DuplicateNameError(user.name)
        self._users.append(user)
        self.invalidate()

    def create_user(self, name: str, year: int, zip_code: int) -> User:
        """Allocate the next ID and append a friendless user."""
        user = User(id=len(self._users), name=name, year=year, zip=zip_code)
        self.add_user(user)
        return user

    def connect(self, name_a: str, name_b: str) -> ConnectOutcome:
        """Add a friendship between two users addressed by name."""
        if name_a == name_b:
            return ConnectOutcome.REJECTED
        id_a, id_b = self.get_id(name_a), self.get_id(name_b)
        if id_a is None or id_b is None:
            return ConnectOutcome.NOT_FOUND
        return self.connect_ids(id_a, id_b)

    def connect_ids(self, id_a: int, id_b: int) -> ConnectOutcome:
        """Add a friendship between two users addressed by ID."""
        if id_a == id_b:
            return ConnectOutcome.REJECTED
        user_a, user_b = self.get_user(id_a), self.get_user(id_b)
        if user_a is None or user_b is None:
            return ConnectOutcome.NOT_FOUND
        if user_a.is_friend(id_b):
            return ConnectOutcome.ALREADY_CONNECTED
        user_a.add_friend(id_b)
        user_b.add_friend(id_a)
        self.invalidate()
        return ConnectOutcome.CONNECTED

    def disconnect(self, name_a: str, name_b: str) -> DisconnectOutcome:
        """Remove a friendship between two users addressed by name."""
        if name_a == name_b:
            return DisconnectOutcome.REJECTED
        id_a, id_b = self.get_id(name_a), self.get_id(name_b)
        if id_a is None or id_b is None:
            return DisconnectOutcome.NOT_FOUND
        return self.disconnect_ids(id_a, id_b)

    def disconnect_ids(self, id_a: int, id_b: int) -> DisconnectOutcome:
        """Remove a friendship between two users addressed by ID."""
        if id_a == id_b:
            return DisconnectOutcome.REJECTED
        user_a, user_b = self.get_user(id_a), self.get_user(id_b)
        if user_a is None or user_b is None:
            return DisconnectOutcome.NOT_FOUND
        if not user_a.is_friend(id_b):
            return DisconnectOutcome.NO_SUCH_CONNECTION
        user_a.delete_friend(id_b)
        user_b.delete_friend(id_a)
        self.invalidate()
        return DisconnectOutcome.DISCONNECTED

    # ------------------------------------------------------------------
    # Bulk load / dump
    # ------------------------------------------------------------------

    def load_records(self, records: Iterable[UserRecord]) -> None:
        """Append users from bulk-load records.

        Every record's ID must equal its position, and every friend
        reference must point at a loaded user other than itself and be
        reciprocated. Nothing is added if any check fails.

        Raises:
            InvalidArgumentError: A record breaks one of the rules above.
            DuplicateNameError: Names are unique and a record reuses one.
        """
        incoming = [User.from_record(r) for r in records]
        base = len(self._users)
        total = base + len(incoming)
        seen_names = {u.name for u in self._users} if self._unique_names else set()

        for offset, user in enumerate(incoming):
            if user.id != base + offset:
                raise InvalidArgumentError(
                    f"record {offset} has id {user.id}, expected {base + offset}"
                )
            if self._unique_names:
                if user.name in seen_names:
                    raise DuplicateNameError(user.name)
                seen_names.add(user.name)

        def lookup(uid: int) -> User:
            return self._users[uid] if uid < base else incoming[uid - base]

        for user in incoming:
            for friend_id in user.friends:
                if friend_id == user.id:
                    raise InvalidArgumentError(f"user {user.id} lists itself as a friend")
                if not 0 <= friend_id < total:
                    raise InvalidArgumentError(
                        f"user {user.id} references unknown friend {friend_id}"
                    )
                if user.id not in lookup(friend_id).friends:
                    raise InvalidArgumentError(
                        f"friendship {user.id} -> {friend_id} is not reciprocated"
                    )

        self._users.extend(incoming)
        self.invalidate()
        logger.debug("Loaded %d users (total %d)", len(incoming), len(self._users))

    def dump_records(self) -> list[UserRecord]:
        """Return every user as a record, in ID order, friends ascending."""
        return [user.to_record() for user in self._users]

    # ------------------------------------------------------------------
    # Shortest path: BFS with early exit on discovery
    # ------------------------------------------------------------------

    def shortest_path(
        self,
        from_id: int,
        to_id: int,
        *,
        observer: TraversalObserver | None = None,
    ) -> list[int]:
        """Return the fewest-hops path from *from_id* to *to_id*.

        ``[from_id]`` when both are the same user; ``[]`` when no path
        exists or either ID is out of range.
        """
        if not (self.is_valid_id(from_id) and self.is_valid_id(to_id)):
            return []
        if from_id == to_id:
            return [from_id]

        visited = {from_id}
        predecessor: dict[int, int] = {}
        depth = {from_id: 0}
        queue: deque[int] = deque([from_id])

        while queue:
            current = queue.popleft()
            if observer:
                observer.visit(current, depth[current])
            for neighbor in sorted(self._users[current].friends):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                predecessor[neighbor] = current
                depth[neighbor] = depth[current] + 1
                if observer:
                    observer.discover(neighbor, depth[neighbor], current)
                if neighbor == to_id:
                    return _walk_back(predecessor, to_id)
                queue.append(neighbor)

        return []

    # ------------------------------------------------------------------
    # Exact-distance lookup: first node discovered at the distance
    # ------------------------------------------------------------------

    def distance_user(
        self,
        from_id: int,
        distance: int,
        *,
        observer: TraversalObserver | None = None,
    ) -> DistanceMatch:
        """Find the first user exactly *distance* hops from *from_id*.

        Only newly discovered neighbours are tested, so a distance of 0
        never matches. Under ascending neighbour order the first user
        discovered at the distance wins; others at the same layer are
        not reported.
        """
        if not self.is_valid_id(from_id) or distance < 0:
            return DistanceMatch(None, [])

        visited = {from_id}
        predecessor: dict[int, int] = {}
        dist = {from_id: 0}
        queue: deque[int] = deque([from_id])

        while queue:
            current = queue.popleft()
            if observer:
                observer.visit(current, dist[current])
            for neighbor in sorted(self._users[current].friends):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                predecessor[neighbor] = current
                dist[neighbor] = dist[current] + 1
                if observer:
                    observer.discover(neighbor, dist[neighbor], current)
                if dist[neighbor] == distance:
                    return DistanceMatch(neighbor, _walk_back(predecessor, neighbor))
                queue.append(neighbor)

        return DistanceMatch(None, [])

    # ------------------------------------------------------------------
    # Connected components: iterative DFS
    # ------------------------------------------------------------------

    def _dfs(self, root: int, visited: list[bool]) -> list[int]:
        """Collect everything reachable from *root* in stack-pop order."""
        component: list[int] = []
        stack = [root]
        visited[root] = True
        while stack:
            current = stack.pop()
            component.append(current)
            for neighbor in sorted(self._users[current].friends):
                if not visited[neighbor]:
                    visited[neighbor] = True
                    stack.append(neighbor)
        return component

    def groups(self) -> list[list[int]]:
        """Partition all users into connected components.

        Roots are taken in ascending ID order; members appear in DFS
        visitation order.
        """
        visited = [False] * len(self._users)
        components: list[list[int]] = []
        for user_id in range(len(self._users)):
            if not visited[user_id]:
                components.append(self._dfs(user_id, visited))
        return components

    # ------------------------------------------------------------------
    # Friend suggestions: common-neighbour counting
    # ------------------------------------------------------------------

    def suggest_friends(self, who: int) -> Suggestions:
        """Suggest non-friends who share the most mutual friends with *who*.

        Returns every candidate tied at the highest count, ascending by ID.
        Score 0 with no IDs when *who* is invalid or has no candidates.
        """
        user = self.get_user(who)
        if user is None:
            return Suggestions(0, [])

        counts: dict[int, int] = {}
        for friend_id in user.friends:
            for candidate in self._users[friend_id].friends:
                if candidate == who or candidate in user.friends:
                    continue
                counts[candidate] = counts.get(candidate, 0) + 1

        if not counts:
            return Suggestions(0, [])
        score = max(counts.values())
        return Suggestions(score, sorted(c for c, n in counts.items() if n == score))

    # ------------------------------------------------------------------
    # NetworkX view
    # ------------------------------------------------------------------

    @property
    def graph(self) -> nx.Graph[int]:
        """Return the NetworkX view, building it on first access."""
        if self._graph is None:
            self._graph = self._build_graph()
        return self._graph

    def invalidate(self) -> None:
        """Drop the cached NetworkX view, forcing a rebuild on next access."""
        self._graph = None

    def _build_graph(self) -> nx.Graph[int]:
        """Build an undirected NetworkX graph, isolated users included."""
        g: nx.Graph[int] = nx.Graph()
        for user in self._users:
            g.add_node(user.id, name=user.name, year=user.year, zip=user.zip)
        for user in self._users:
            g.add_edges_from((user.id, f) for f in user.friends if f > user.id)
        return g
