"""Tests for NetworkEngine — mutations, bulk load, and traversal queries."""

from __future__ import annotations

import pytest

from friendgraph.domain.errors import DuplicateNameError, InvalidArgumentError
from friendgraph.domain.types import ConnectOutcome, DisconnectOutcome
from friendgraph.domain.user import User, UserRecord
from friendgraph.infrastructure.graph.engine import DistanceMatch, NetworkEngine, Suggestions


def _engine_with(count: int, edges: list[tuple[int, int]]) -> NetworkEngine:
    """Engine with users ``u0..u{count-1}`` and the given friendships."""
    eng = NetworkEngine()
    for i in range(count):
        eng.create_user(f"u{i}", 2000, i)
    for a, b in edges:
        assert eng.connect_ids(a, b) is ConnectOutcome.CONNECTED
    return eng


class RecordingObserver:
    def __init__(self) -> None:
        self.visits: list[tuple[int, int]] = []
        self.discoveries: list[tuple[int, int, int]] = []

    def visit(self, node: int, depth: int) -> None:
        self.visits.append((node, depth))

    def discover(self, node: int, depth: int, parent: int) -> None:
        self.discoveries.append((node, depth, parent))


# ── Users ─────────────────────────────────────────────────────────────


class TestAddUser:
    def test_ids_are_positions(self, engine: NetworkEngine) -> None:
        a = engine.create_user("Alice", 1990, 1)
        b = engine.create_user("Bob", 1991, 2)
        assert (a.id, b.id) == (0, 1)
        assert engine.num_users() == 2
        assert engine.get_user(1) is b

    def test_none_rejected(self, engine: NetworkEngine) -> None:
        with pytest.raises(InvalidArgumentError):
            engine.add_user(None)

    def test_wrong_id_rejected(self, engine: NetworkEngine) -> None:
        with pytest.raises(InvalidArgumentError, match="next position 0"):
            engine.add_user(User(id=5, name="X", year=1, zip=1))
        assert engine.num_users() == 0

    def test_duplicate_names_allowed_by_default(self, engine: NetworkEngine) -> None:
        engine.create_user("Sam", 1990, 1)
        engine.create_user("Sam", 1991, 2)
        assert engine.get_id("Sam") == 0

    def test_duplicate_names_rejected_when_unique(self) -> None:
        eng = NetworkEngine(unique_names=True)
        eng.create_user("Sam", 1990, 1)
        with pytest.raises(DuplicateNameError) as exc_info:
            eng.create_user("Sam", 1991, 2)
        assert exc_info.value.name == "Sam"
        assert eng.num_users() == 1

    def test_lookup_misses(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.get_id("Zed") is None
        assert chain_engine.get_user(4) is None
        assert chain_engine.get_user(-1) is None
        assert not chain_engine.is_valid_id(4)

    def test_users_view_is_read_only(self, chain_engine: NetworkEngine) -> None:
        users = chain_engine.users
        assert isinstance(users, tuple)
        assert [u.name for u in users] == ["Alice", "Bob", "Carol", "Dave"]


# ── Connections ───────────────────────────────────────────────────────


class TestConnect:
    def test_connect_is_symmetric(self, chain_engine: NetworkEngine) -> None:
        for user in chain_engine.users:
            for friend_id in user.friends:
                assert chain_engine.get_user(friend_id).is_friend(user.id)  # type: ignore[union-attr]

    def test_symmetry_holds_after_mixed_mutations(self, chain_engine: NetworkEngine) -> None:
        steps = [
            ("connect", 0, 3),
            ("disconnect", 1, 2),
            ("connect", 0, 3),
            ("connect", 2, 0),
            ("disconnect", 3, 2),
            ("disconnect", 1, 3),
            ("connect", 3, 1),
            ("disconnect", 0, 1),
            ("connect", 1, 1),
        ]
        for action, a, b in steps:
            if action == "connect":
                chain_engine.connect_ids(a, b)
            else:
                chain_engine.disconnect_ids(a, b)
            users = chain_engine.users
            for x in users:
                for y in users:
                    assert (y.id in x.friends) == (x.id in y.friends), (action, a, b)
        assert {(u.id, v) for u in chain_engine.users for v in u.friends if u.id < v} == {
            (0, 2),
            (0, 3),
            (1, 3),
        }

    def test_already_connected(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.connect("Bob", "Alice") is ConnectOutcome.ALREADY_CONNECTED
        assert not ConnectOutcome.ALREADY_CONNECTED.changed

    def test_self_connection_rejected(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.connect("Alice", "Alice") is ConnectOutcome.REJECTED
        assert chain_engine.connect_ids(2, 2) is ConnectOutcome.REJECTED
        assert not chain_engine.get_user(0).is_friend(0)  # type: ignore[union-attr]

    def test_unknown_user(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.connect("Alice", "Zed") is ConnectOutcome.NOT_FOUND
        assert chain_engine.connect_ids(0, 99) is ConnectOutcome.NOT_FOUND

    def test_disconnect(self, chain_engine: NetworkEngine) -> None:
        outcome = chain_engine.disconnect("Carol", "Bob")
        assert outcome is DisconnectOutcome.DISCONNECTED
        assert outcome.changed
        assert not chain_engine.get_user(1).is_friend(2)  # type: ignore[union-attr]
        assert not chain_engine.get_user(2).is_friend(1)  # type: ignore[union-attr]

    def test_disconnect_missing_edge(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.disconnect("Alice", "Dave") is DisconnectOutcome.NO_SUCH_CONNECTION

    def test_disconnect_self_and_unknown(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.disconnect("Bob", "Bob") is DisconnectOutcome.REJECTED
        assert chain_engine.disconnect("Bob", "Zed") is DisconnectOutcome.NOT_FOUND


# ── Bulk load / dump ──────────────────────────────────────────────────


class TestLoadRecords:
    def test_round_trip(self, chain_engine: NetworkEngine) -> None:
        records = chain_engine.dump_records()
        rebuilt = NetworkEngine.from_records(records)
        assert rebuilt.dump_records() == records

    def test_dump_friends_ascending(self) -> None:
        eng = _engine_with(4, [(0, 3), (0, 1), (0, 2)])
        assert eng.dump_records()[0].friends == [1, 2, 3]

    def test_id_must_match_position(self) -> None:
        records = [UserRecord(id=1, name="A", year=1, zip=1)]
        with pytest.raises(InvalidArgumentError, match="expected 0"):
            NetworkEngine.from_records(records)

    def test_self_reference_rejected(self) -> None:
        records = [UserRecord(id=0, name="A", year=1, zip=1, friends=[0])]
        with pytest.raises(InvalidArgumentError, match="itself"):
            NetworkEngine.from_records(records)

    def test_dangling_reference_rejected(self) -> None:
        records = [UserRecord(id=0, name="A", year=1, zip=1, friends=[4])]
        with pytest.raises(InvalidArgumentError, match="unknown friend 4"):
            NetworkEngine.from_records(records)

    def test_unreciprocated_rejected(self) -> None:
        records = [
            UserRecord(id=0, name="A", year=1, zip=1, friends=[1]),
            UserRecord(id=1, name="B", year=1, zip=1),
        ]
        with pytest.raises(InvalidArgumentError, match="not reciprocated"):
            NetworkEngine.from_records(records)

    def test_failed_load_leaves_engine_untouched(self, chain_engine: NetworkEngine) -> None:
        before = chain_engine.dump_records()
        bad = [UserRecord(id=4, name="E", year=1, zip=1, friends=[9])]
        with pytest.raises(InvalidArgumentError):
            chain_engine.load_records(bad)
        assert chain_engine.dump_records() == before

    def test_load_appends_after_existing(self, chain_engine: NetworkEngine) -> None:
        chain_engine.load_records([UserRecord(id=4, name="Eve", year=1, zip=1)])
        assert chain_engine.get_id("Eve") == 4

    def test_unique_names_on_load(self) -> None:
        records = [
            UserRecord(id=0, name="A", year=1, zip=1),
            UserRecord(id=1, name="A", year=1, zip=1),
        ]
        with pytest.raises(DuplicateNameError):
            NetworkEngine.from_records(records, unique_names=True)


# ── Shortest path ─────────────────────────────────────────────────────


class TestShortestPath:
    def test_chain(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.shortest_path(0, 3) == [0, 1, 2, 3]

    def test_reflexive(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.shortest_path(2, 2) == [2]

    def test_invalid_ids(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.shortest_path(0, 99) == []
        assert chain_engine.shortest_path(-1, 0) == []

    def test_disconnected(self) -> None:
        eng = _engine_with(4, [(0, 1), (2, 3)])
        assert eng.shortest_path(0, 3) == []

    def test_prefers_fewest_hops(self) -> None:
        # 0-1-2-3-4 ring closed by 0-4
        eng = _engine_with(5, [(0, 1), (1, 2), (2, 3), (3, 4), (0, 4)])
        assert eng.shortest_path(0, 3) == [0, 4, 3]

    def test_ties_broken_by_ascending_id(self) -> None:
        # Two 2-hop routes from 0 to 3: via 1 and via 2.
        eng = _engine_with(4, [(0, 2), (0, 1), (1, 3), (2, 3)])
        assert eng.shortest_path(0, 3) == [0, 1, 3]

    def test_consecutive_steps_are_friends(self) -> None:
        eng = _engine_with(6, [(0, 1), (1, 2), (0, 3), (3, 4), (4, 5), (2, 5)])
        path = eng.shortest_path(0, 5)
        assert len(path) == 4
        for a, b in zip(path, path[1:], strict=False):
            assert eng.get_user(a).is_friend(b)  # type: ignore[union-attr]

    def test_observer_receives_progress(self, chain_engine: NetworkEngine) -> None:
        observer = RecordingObserver()
        chain_engine.shortest_path(0, 3, observer=observer)
        assert observer.visits == [(0, 0), (1, 1), (2, 2)]
        assert observer.discoveries == [(1, 1, 0), (2, 2, 1), (3, 3, 2)]


# ── Exact distance ────────────────────────────────────────────────────


class TestDistanceUser:
    def test_chain_distance_two(self, chain_engine: NetworkEngine) -> None:
        match = chain_engine.distance_user(0, 2)
        assert match == DistanceMatch(2, [0, 1, 2])

    def test_distance_one(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.distance_user(1, 1).found_id == 0

    def test_distance_zero_never_matches(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.distance_user(0, 0) == DistanceMatch(None, [])

    def test_beyond_reach(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.distance_user(0, 4) == DistanceMatch(None, [])

    def test_invalid_input(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.distance_user(9, 1).found_id is None
        assert chain_engine.distance_user(0, -1).found_id is None

    def test_first_in_layer_wins(self) -> None:
        eng = _engine_with(5, [(0, 3), (0, 1), (3, 4), (1, 2)])
        match = eng.distance_user(0, 2)
        assert match.found_id == 2
        assert match.path == [0, 1, 2]


# ── Groups ────────────────────────────────────────────────────────────


class TestGroups:
    def test_single_chain_component(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.groups() == [[0, 1, 2, 3]]

    def test_empty(self, engine: NetworkEngine) -> None:
        assert engine.groups() == []

    def test_isolated_users_are_singletons(self) -> None:
        eng = _engine_with(3, [])
        assert eng.groups() == [[0], [1], [2]]

    def test_partition(self) -> None:
        eng = _engine_with(6, [(0, 4), (1, 2), (2, 5)])
        groups = eng.groups()
        assert groups == [[0, 4], [1, 2, 5], [3]]
        flat = sorted(uid for group in groups for uid in group)
        assert flat == list(range(6))

    def test_dfs_visitation_order(self) -> None:
        # Star around 0: neighbours pushed ascending, popped descending.
        eng = _engine_with(4, [(0, 1), (0, 2), (0, 3)])
        assert eng.groups() == [[0, 3, 2, 1]]


# ── Suggestions ───────────────────────────────────────────────────────


class TestSuggestFriends:
    def test_chain(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.suggest_friends(0) == Suggestions(1, [2])

    def test_ties_sorted(self) -> None:
        # 0 knows 1 and 2; both know 3 and 4.
        eng = _engine_with(5, [(0, 1), (0, 2), (1, 3), (2, 3), (1, 4), (2, 4)])
        assert eng.suggest_friends(0) == Suggestions(2, [3, 4])

    def test_highest_count_wins(self) -> None:
        eng = _engine_with(5, [(0, 1), (0, 2), (1, 3), (2, 3), (1, 4)])
        assert eng.suggest_friends(0) == Suggestions(2, [3])

    def test_excludes_self_and_friends(self) -> None:
        eng = _engine_with(3, [(0, 1), (1, 2), (0, 2)])
        assert eng.suggest_friends(0) == Suggestions(0, [])

    def test_no_friends(self) -> None:
        eng = _engine_with(3, [(1, 2)])
        assert eng.suggest_friends(0) == Suggestions(0, [])

    def test_invalid_id(self, chain_engine: NetworkEngine) -> None:
        assert chain_engine.suggest_friends(42) == Suggestions(0, [])


# ── NetworkX view ─────────────────────────────────────────────────────


class TestGraphView:
    def test_nodes_and_edges(self, chain_engine: NetworkEngine) -> None:
        g = chain_engine.graph
        assert g.number_of_nodes() == 4
        assert g.number_of_edges() == 3
        assert g.nodes[0]["name"] == "Alice"

    def test_isolated_users_included(self) -> None:
        eng = _engine_with(2, [])
        assert eng.graph.number_of_nodes() == 2

    def test_rebuilt_after_mutation(self, chain_engine: NetworkEngine) -> None:
        first = chain_engine.graph
        assert chain_engine.graph is first
        chain_engine.connect("Alice", "Dave")
        assert chain_engine.graph is not first
        assert chain_engine.graph.has_edge(0, 3)
