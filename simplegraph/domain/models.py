"""Graph records and query descriptions; no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

Identifier = Union[str, int]

ResultColumn = Literal["id", "body"]
Comparison = Literal["=", "LIKE", ">", "<"]
Connector = Literal["AND", "OR", "NOT"]


# ── Graph records ───────────────────────────────────────────────────────────

@dataclass
class NodeData:
    """A node as surfaced by a traversal."""

    identifier: Identifier
    body: dict[str, Any] = field(default_factory=dict)


@dataclass
class EdgeData:
    """A directed edge; the (source, target, properties) triple is its identity."""

    source: Identifier
    target: Identifier
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class GraphData:
    """One traversal row: exactly one of ``node`` or ``edge`` is set."""

    node: NodeData | None = None
    edge: EdgeData | None = None
    depth: int = 0

    @property
    def is_edge(self) -> bool:
        return self.edge is not None


# ── Query descriptions ──────────────────────────────────────────────────────

@dataclass
class WhereClause:
    """Declarative description of a single filter predicate.

    Exactly one of ``id_lookup``, ``key_value`` or ``tree`` selects the kind.
    ``key`` is a dotted JSON path below the document root.
    """

    id_lookup: bool = False
    key_value: bool = False
    tree: bool = False
    predicate: Comparison = "="
    and_or: Connector | None = None
    key: str | None = None


@dataclass
class SearchQuery:
    """Which column to return, optional json_tree expansion, and filters."""

    result_column: ResultColumn = "body"
    key: str | None = None
    tree: bool = False
    search_clauses: list[Any] = field(default_factory=list)


@dataclass
class TraversalConfig:
    """Direction, payload and depth settings for :meth:`traverse`.

    Without ``max_depth`` the walk is bounded by the node count.  On cyclic
    graphs nodes are then revisited once per depth level, so an unbounded
    traversal costs roughly nodes x (nodes + edges) rows.  Pass ``max_depth``
    on large graphs.
    """

    with_bodies: bool = False
    inbound: bool = False
    outbound: bool = False
    max_depth: int | None = None


# ── Merge helper ────────────────────────────────────────────────────────────

def shallow_overlay(existing: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Overlay *update* onto *existing*, top-level keys only.

    Keys in *update* overwrite, keys only in *existing* are kept, and nested
    objects are replaced wholesale rather than merged recursively.
    """
    merged = dict(existing)
    for key, value in update.items():
        merged[key] = value
    return merged
