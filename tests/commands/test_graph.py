"""Tests for graph CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from friendgraph.cli import cli

CHAIN_FILE = """\
5
0
Alice
1990
10000
1
1
Bob
1991
10001
0 2
2
Carol
1992
10002
1 3
3
Dave
1993
10003
2
4
Eve
1994
10004

"""


@pytest.fixture
def _seed_chain(tmp_path: Path) -> None:
    """Alice - Bob - Carol - Dave chain plus isolated Eve."""
    (tmp_path / "users.txt").write_text(CHAIN_FILE, encoding="utf-8")


@pytest.mark.usefixtures("_isolated_workspace", "_seed_chain")
class TestPathCommand:
    def test_path_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "path", "Alice", "Dave"])
        assert result.exit_code == 0, result.output
        assert "0 (Alice) → 1 (Bob) → 2 (Carol) → 3 (Dave)" in result.output
        assert "Path length: 3" in result.output

    def test_path_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "graph", "path", "Alice", "Carol"])
        assert result.output.strip() == "0\n1\n2"

    def test_path_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "graph", "path", "Alice", "Dave"])
        data = json.loads(result.output)
        assert [s["id"] for s in data["data"]["steps"]] == [0, 1, 2, 3]

    def test_no_path_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "graph", "path", "Alice", "Eve"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "NO_PATH"


@pytest.mark.usefixtures("_isolated_workspace", "_seed_chain")
class TestDistanceCommand:
    def test_found(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "distance", "Alice", "2"])
        assert result.exit_code == 0
        assert "Found 2 (Carol) at distance 2" in result.output

    def test_nothing_at_distance(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "distance", "Alice", "7"])
        assert result.exit_code == 0
        assert "No user at distance 7." in result.output

    def test_non_integer_hops(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "distance", "Alice", "two"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_workspace", "_seed_chain")
class TestGroupsSuggestStats:
    def test_groups_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "graph", "groups"])
        assert result.output.strip().splitlines() == ["0 1 2 3", "4"]

    def test_groups_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "groups"])
        assert "2 groups" in result.output
        assert "Group 0 (4 users)" in result.output

    def test_suggest(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "graph", "suggest", "Alice"])
        data = json.loads(result.output)["data"]
        assert data["items"] == [{"id": 2, "name": "Carol", "score": 1}]

    def test_stats(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "graph", "stats"])
        data = json.loads(result.output)["data"]
        assert data["users"] == 5
        assert data["components"] == 2
        assert data["isolated"] == 1

    def test_verbose_shows_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "graph", "path", "Alice", "Dave"])
        assert result.exit_code == 0
        assert "NetworkService.path" in result.output
        assert "bfs" in result.output


@pytest.mark.usefixtures("_isolated_workspace")
class TestBrokenDataFile:
    def test_malformed_file_is_io_error(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "users.txt").write_text("3\n0\nAlice\n", encoding="utf-8")
        result = cli_runner.invoke(cli, ["graph", "groups"])
        assert result.exit_code == 1
        assert "Cannot load network" in result.output
