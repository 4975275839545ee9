"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, friendgraph.toml only contains
overrides. An empty (or absent) file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class NetworkConfig(BaseModel):
    """[network] section."""

    model_config = {"frozen": True}

    data_file: str = "users.txt"
    autosave: bool = True
    unique_names: bool = False


class QueryConfig(BaseModel):
    """[query] section."""

    model_config = {"frozen": True}

    max_distance: int = Field(default=64, ge=0)


class FriendgraphConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
