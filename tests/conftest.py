"""Shared pytest fixtures and test helpers for friendgraph tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from friendgraph.config.settings import FriendgraphSettings
from friendgraph.infrastructure.graph.engine import NetworkEngine
from friendgraph.infrastructure.store import NetworkStore
from friendgraph.services.telemetry import _current_span, disable_telemetry

CHAIN_NAMES = ("Alice", "Bob", "Carol", "Dave")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's FRIENDGRAPH_* environment out of every test."""
    for key in list(os.environ):
        if key.startswith("FRIENDGRAPH_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``--verbose`` CLI runs enable telemetry for the rest of the context."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def engine() -> NetworkEngine:
    """Empty engine with duplicate names allowed."""
    return NetworkEngine()


@pytest.fixture
def chain_engine() -> NetworkEngine:
    """Four users connected as a chain: Alice - Bob - Carol - Dave."""
    eng = NetworkEngine()
    for index, name in enumerate(CHAIN_NAMES):
        eng.create_user(name, 1990 + index, 10000 + index)
    eng.connect("Alice", "Bob")
    eng.connect("Bob", "Carol")
    eng.connect("Carol", "Dave")
    return eng


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Temporary workspace directory holding the data file."""
    return tmp_path


@pytest.fixture
def store(workspace: Path) -> NetworkStore:
    """Store over an empty workspace (no data file yet)."""
    settings = FriendgraphSettings.from_cli(workspace_root=workspace)
    return NetworkStore(settings)


@pytest.fixture
def chain_store(store: NetworkStore, chain_engine: NetworkEngine) -> NetworkStore:
    """Store whose engine holds the Alice - Bob - Carol - Dave chain."""
    store.replace(chain_engine)
    return store


@pytest.fixture
def _isolated_workspace(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp workspace so the CLI reads and writes there.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes. Tests that need the path can also request ``tmp_path``
    directly (pytest deduplicates, it's the same directory).
    """
    monkeypatch.chdir(workspace)
