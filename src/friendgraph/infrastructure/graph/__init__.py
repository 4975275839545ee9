"""In-memory graph engine."""

from friendgraph.infrastructure.graph.engine import NetworkEngine

__all__ = ["NetworkEngine"]
