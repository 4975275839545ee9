"""ExportService — record dumps, graph exports, and bulk import.

Record exports use the engine's bulk-dump contract; graph exports are
built from the engine's NetworkX view.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import networkx as nx

from friendgraph.domain.records import render_users
from friendgraph.domain.types import ErrorCode
from friendgraph.infrastructure.graph.engine import NetworkEngine
from friendgraph.infrastructure.store import read_records
from friendgraph.services.base import BaseService
from friendgraph.services.result import ServiceResult
from friendgraph.services.telemetry import trace_span, traced

RECORD_FORMATS = ("text", "json")
GRAPH_FORMATS = ("dot", "json")


def _edge_pairs(g: nx.Graph[int]) -> list[tuple[int, int]]:
    """Each undirected edge once as (lower id, higher id), ascending."""
    return sorted((min(u, v), max(u, v)) for u, v in g.edges())


class ExportService(BaseService):
    """Serializes the network and loads it from external files."""

    # ── Records ───────────────────────────────────────────────────────

    @traced
    def export_records(self, *, fmt: str = "text") -> ServiceResult:
        """Dump every user record.

        Formats:
        - ``text`` — the flat-file layout used for the data file
        - ``json`` — a list of ``{id, name, year, zip, friends}`` objects

        Returns the content as a string in ``data["content"]``.
        """
        op = "export_records"
        if fmt not in RECORD_FORMATS:
            return ServiceResult.fail(
                op,
                ErrorCode.INVALID_FORMAT,
                f"Unknown record format: {fmt}",
                format=fmt,
                valid=list(RECORD_FORMATS),
            )
        if (failure := self._load_failure(op)) is not None:
            return failure

        records = self._engine.dump_records()
        if fmt == "text":
            content = render_users(records)
        else:
            content = json.dumps([r.model_dump() for r in records], indent=2) + "\n"
        return ServiceResult(
            ok=True,
            op=op,
            data={"format": fmt, "content": content, "user_count": len(records)},
        )

    # ── Graph ─────────────────────────────────────────────────────────

    @traced
    def export_graph(self, *, fmt: str = "dot") -> ServiceResult:
        """Export the friendship graph.

        Formats:
        - ``dot`` — Graphviz DOT language (undirected)
        - ``json`` — D3-compatible ``{"nodes": [...], "links": [...]}``
        """
        op = "export_graph"
        if fmt not in GRAPH_FORMATS:
            return ServiceResult.fail(
                op,
                ErrorCode.INVALID_FORMAT,
                f"Unknown graph format: {fmt}",
                format=fmt,
                valid=list(GRAPH_FORMATS),
            )
        if (failure := self._load_failure(op)) is not None:
            return failure

        g = self._engine.graph
        content = self._to_dot(g) if fmt == "dot" else self._to_d3_json(g)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "format": fmt,
                "content": content,
                "node_count": g.number_of_nodes(),
                "edge_count": g.number_of_edges(),
            },
        )

    @staticmethod
    def _to_dot(g: nx.Graph[int]) -> str:
        """Generate Graphviz DOT notation for an undirected graph."""
        lines = ["graph friends {", "  node [shape=ellipse];"]
        for node_id, attrs in g.nodes(data=True):
            label = str(attrs.get("name", node_id))
            safe_label = label.replace("\\", "\\\\").replace('"', '\\"')
            lines.append(f'  {node_id} [label="{safe_label}"];')
        for src, tgt in _edge_pairs(g):
            lines.append(f"  {src} -- {tgt};")
        lines.append("}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _to_d3_json(g: nx.Graph[int]) -> str:
        """Generate D3-compatible JSON."""
        d3_nodes: list[dict[str, Any]] = [
            {
                "id": node_id,
                "name": attrs.get("name", ""),
                "year": attrs.get("year"),
                "zip": attrs.get("zip"),
            }
            for node_id, attrs in g.nodes(data=True)
        ]
        d3_links = [{"source": src, "target": tgt} for src, tgt in _edge_pairs(g)]
        return json.dumps({"nodes": d3_nodes, "links": d3_links}, indent=2) + "\n"

    # ── Import ────────────────────────────────────────────────────────

    @traced
    def import_records(self, path: Path) -> ServiceResult:
        """Replace the network with the users in a flat file at *path*.

        The file is fully validated before the current network is touched.
        """
        op = "import"
        with trace_span("parse") as span:
            try:
                records = read_records(path)
                engine = NetworkEngine.from_records(
                    records, unique_names=self._store.settings.network.unique_names
                )
            except OSError as exc:
                return ServiceResult.fail(
                    op, ErrorCode.IO_ERROR, f"Cannot read {path}: {exc}", path=str(path)
                )
            except ValueError as exc:
                return ServiceResult.fail(
                    op,
                    ErrorCode.INVALID_ARGUMENT,
                    f"Invalid data in {path}: {exc}",
                    path=str(path),
                )
            if span:
                span.annotate("users", len(records))

        self._store.replace(engine)
        warnings: list[str] = []
        self._dispatch_event("post_import", {"path": str(path), "users": len(records)}, warnings)
        saved = self._persist(warnings)
        data: dict[str, Any] = {"source": str(path), "user_count": len(records)}
        if saved:
            data["path"] = saved
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
