"""Port: JSON-document graph database."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from simplegraph.domain.models import (
    EdgeData,
    GraphData,
    Identifier,
    SearchQuery,
    TraversalConfig,
)


class GraphDatabasePort(ABC):
    """Store nodes and edges, search nodes and traverse the graph."""

    # ── nodes ──

    @abstractmethod
    def add_node(self, body: dict[str, Any], identifier: Identifier | None = None) -> None: ...

    @abstractmethod
    def add_nodes(
        self,
        bodies: Sequence[dict[str, Any]],
        identifiers: Sequence[Identifier] | None = None,
    ) -> None: ...

    @abstractmethod
    def find_node(self, identifier: Identifier) -> dict[str, Any] | None: ...

    @abstractmethod
    def update_node_body(self, identifier: Identifier, body: dict[str, Any]) -> None: ...

    @abstractmethod
    def upsert_node(self, identifier: Identifier, body: dict[str, Any]) -> None: ...

    @abstractmethod
    def remove_node(self, identifier: Identifier) -> None: ...

    @abstractmethod
    def remove_nodes(self, identifiers: Sequence[Identifier]) -> None: ...

    # ── edges ──

    @abstractmethod
    def connect_nodes(self, source: Identifier, target: Identifier) -> None: ...

    @abstractmethod
    def connect_nodes_with_properties(
        self, source: Identifier, target: Identifier, properties: dict[str, Any]
    ) -> None: ...

    @abstractmethod
    def connections(self, identifier: Identifier) -> list[EdgeData]: ...

    @abstractmethod
    def connections_in(self, identifier: Identifier) -> list[EdgeData]: ...

    @abstractmethod
    def connections_out(self, identifier: Identifier) -> list[EdgeData]: ...

    @abstractmethod
    def bulk_connect_nodes(
        self, sources: Sequence[Identifier], targets: Sequence[Identifier]
    ) -> None: ...

    @abstractmethod
    def bulk_connect_nodes_with_properties(
        self,
        sources: Sequence[Identifier],
        targets: Sequence[Identifier],
        properties: Sequence[dict[str, Any]],
    ) -> None: ...

    # ── search / traversal ──

    @abstractmethod
    def find_nodes(
        self, query: SearchQuery, bindings: Sequence[Any] | None = None
    ) -> list[dict[str, Any]]: ...

    @abstractmethod
    def traverse(self, source: Identifier, config: TraversalConfig) -> list[GraphData]: ...

    # ── lifecycle ──

    @abstractmethod
    def close(self) -> None: ...
