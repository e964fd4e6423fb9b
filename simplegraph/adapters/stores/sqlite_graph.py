"""Graph database adapter: SQLite.

Nodes are JSON documents in ``nodes.body``; the ``id`` column is generated
from ``$.id`` and is unique.  Edges are ``(source, target, properties)``
triples with foreign keys into ``nodes(id)``.

Single-row writes commit on their own.  Batch writes run inside one
transaction and roll back completely on the first failure.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from simplegraph.adapters.stores import sqlite_schema as sql
from simplegraph.adapters.stores.sqlite_errors import translate_errors
from simplegraph.codec import (
    decode_json,
    encode_object,
    row_to_edge,
    row_to_graph_data,
    row_to_search_result,
)
from simplegraph.domain.errors import DatabaseError, NotFoundError, ValidationError
from simplegraph.domain.models import (
    EdgeData,
    GraphData,
    Identifier,
    SearchQuery,
    TraversalConfig,
    WhereClause,
    shallow_overlay,
)
from simplegraph.ports.graph_database import GraphDatabasePort
from simplegraph.query import build_search_query, build_traversal_query, build_where_clause

logger = logging.getLogger(__name__)

MEMORY = ":memory:"
JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")


def _require_identifier(identifier: Any, what: str = "identifier") -> Identifier:
    if identifier is None or isinstance(identifier, bool) or not isinstance(identifier, (str, int)):
        raise ValidationError(
            f"{what} must be a string or integer",
            code="MISSING_IDENTIFIER",
            details={what: identifier},
        )
    return identifier


def _with_identifier(body: Any, identifier: Identifier | None) -> dict[str, Any]:
    """Return a copy of *body* carrying its resolved ``id``.

    An explicit *identifier* wins over ``body["id"]``.
    """
    if not isinstance(body, Mapping):
        raise ValidationError(
            "node body must be a JSON object",
            code="INVALID_JSON",
            details={"type": type(body).__name__},
        )
    resolved = dict(body)
    if identifier is not None:
        resolved["id"] = identifier
    if resolved.get("id") is None:
        raise ValidationError("missing node identifier", code="MISSING_IDENTIFIER")
    _require_identifier(resolved["id"], "id")
    return resolved


def _check_lengths(**columns: Sequence[Any]) -> None:
    lengths = {name: len(values) for name, values in columns.items()}
    if len(set(lengths.values())) > 1:
        raise ValidationError(
            "parallel arrays must have the same length",
            code="LENGTH_MISMATCH",
            details=lengths,
        )


class SQLiteGraphDatabase(GraphDatabasePort):
    """Persist a JSON-document graph in a local SQLite database."""

    def __init__(self, db_path: str = MEMORY, *, journal_mode: str = "WAL") -> None:
        if journal_mode.upper() not in JOURNAL_MODES:
            raise ValidationError(
                f"unsupported journal mode: {journal_mode!r}",
                code="INVALID_CONFIG",
                details={"allowed": list(JOURNAL_MODES)},
            )
        if db_path != MEMORY:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        try:
            self._check_capabilities()
            with translate_errors():
                self._conn.execute(f"PRAGMA journal_mode={journal_mode}")
                self._conn.execute("PRAGMA foreign_keys = ON")
            self._create_tables()
        except Exception:
            self._conn.close()
            raise

        self._find_node_sql = build_search_query(
            SearchQuery(search_clauses=[build_where_clause(WhereClause(id_lookup=True))])
        )
        logger.info("opened graph database at %s", db_path)

    # ── schema ──

    def _check_capabilities(self) -> None:
        if sqlite3.sqlite_version_info < sql.MIN_SQLITE_VERSION:
            raise DatabaseError(
                f"SQLite {sqlite3.sqlite_version} is too old",
                code="UNSUPPORTED_ENGINE",
                details={"required": ".".join(map(str, sql.MIN_SQLITE_VERSION))},
            )
        try:
            self._conn.execute("SELECT json('{}'), (SELECT COUNT(*) FROM json_tree('{}'))")
        except sqlite3.OperationalError as exc:
            raise DatabaseError(
                "SQLite JSON functions are unavailable", code="UNSUPPORTED_ENGINE"
            ) from exc

    def _create_tables(self) -> None:
        with translate_errors():
            self._conn.executescript(sql.SCHEMA)
            self._conn.commit()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success; roll back and map the error otherwise."""
        with translate_errors(), self._conn:
            yield self._conn

    # ── nodes ──

    def add_node(self, body: dict[str, Any], identifier: Identifier | None = None) -> None:
        document = encode_object(_with_identifier(body, identifier))
        with self._transaction() as conn:
            conn.execute(sql.INSERT_NODE, (document,))
        logger.debug("added node %r", identifier if identifier is not None else body.get("id"))

    def add_nodes(
        self,
        bodies: Sequence[dict[str, Any]],
        identifiers: Sequence[Identifier] | None = None,
    ) -> None:
        if identifiers is not None:
            _check_lengths(bodies=bodies, identifiers=identifiers)
        documents = [
            encode_object(
                _with_identifier(body, identifiers[i] if identifiers is not None else None)
            )
            for i, body in enumerate(bodies)
        ]
        with self._transaction() as conn:
            conn.executemany(sql.INSERT_NODE, [(doc,) for doc in documents])
        logger.info("added %d nodes", len(documents))

    def find_node(self, identifier: Identifier) -> dict[str, Any] | None:
        with translate_errors():
            row = self._conn.execute(self._find_node_sql, (identifier,)).fetchone()
        return decode_json(row["body"]) if row else None

    def update_node_body(self, identifier: Identifier, body: dict[str, Any]) -> None:
        _require_identifier(identifier)
        document = encode_object(_with_identifier(body, identifier))
        with self._transaction() as conn:
            cur = conn.execute(sql.UPDATE_NODE, (document, identifier))
            if cur.rowcount == 0:
                raise NotFoundError("node not found", details={"id": identifier})
        logger.debug("updated node %r", identifier)

    def upsert_node(self, identifier: Identifier, body: dict[str, Any]) -> None:
        # Read-then-write; not atomic against writers on other connections.
        _require_identifier(identifier)
        existing = self.find_node(identifier)
        if existing is None:
            self.add_node(body, identifier)
        else:
            self.update_node_body(identifier, shallow_overlay(existing, body))

    def remove_node(self, identifier: Identifier) -> None:
        _require_identifier(identifier)
        with self._transaction() as conn:
            conn.execute(sql.DELETE_EDGES, (identifier, identifier))
            cur = conn.execute(sql.DELETE_NODE, (identifier,))
            if cur.rowcount == 0:
                raise NotFoundError("node not found", details={"id": identifier})
        logger.debug("removed node %r", identifier)

    def remove_nodes(self, identifiers: Sequence[Identifier]) -> None:
        for identifier in identifiers:
            _require_identifier(identifier)
        removed = 0
        with self._transaction() as conn:
            for identifier in identifiers:
                conn.execute(sql.DELETE_EDGES, (identifier, identifier))
                removed += conn.execute(sql.DELETE_NODE, (identifier,)).rowcount
        logger.info("removed %d of %d nodes", removed, len(identifiers))

    # ── edges ──

    def connect_nodes(self, source: Identifier, target: Identifier) -> None:
        self.connect_nodes_with_properties(source, target, {})

    def connect_nodes_with_properties(
        self, source: Identifier, target: Identifier, properties: dict[str, Any]
    ) -> None:
        _require_identifier(source, "source")
        _require_identifier(target, "target")
        props = encode_object(properties if properties is not None else {})
        with self._transaction() as conn:
            conn.execute(sql.INSERT_EDGE, (source, target, props))
        logger.debug("connected %r -> %r", source, target)

    def _search_edges(self, statement: str, params: tuple[Any, ...]) -> list[EdgeData]:
        with translate_errors():
            rows = self._conn.execute(statement, params).fetchall()
        return [row_to_edge(r) for r in rows]

    def connections(self, identifier: Identifier) -> list[EdgeData]:
        return self._search_edges(sql.SEARCH_EDGES, (identifier, identifier))

    def connections_in(self, identifier: Identifier) -> list[EdgeData]:
        return self._search_edges(sql.SEARCH_EDGES_INBOUND, (identifier,))

    def connections_out(self, identifier: Identifier) -> list[EdgeData]:
        return self._search_edges(sql.SEARCH_EDGES_OUTBOUND, (identifier,))

    def bulk_connect_nodes(
        self, sources: Sequence[Identifier], targets: Sequence[Identifier]
    ) -> None:
        _check_lengths(sources=sources, targets=targets)
        self.bulk_connect_nodes_with_properties(sources, targets, [{}] * len(sources))

    def bulk_connect_nodes_with_properties(
        self,
        sources: Sequence[Identifier],
        targets: Sequence[Identifier],
        properties: Sequence[dict[str, Any]],
    ) -> None:
        _check_lengths(sources=sources, targets=targets, properties=properties)
        rows = [
            (
                _require_identifier(src, "source"),
                _require_identifier(tgt, "target"),
                encode_object(props if props is not None else {}),
            )
            for src, tgt, props in zip(sources, targets, properties)
        ]
        with self._transaction() as conn:
            conn.executemany(sql.INSERT_EDGE, rows)
        logger.info("connected %d edges", len(rows))

    # ── search / traversal ──

    def find_nodes(
        self, query: SearchQuery, bindings: Sequence[Any] | None = None
    ) -> list[dict[str, Any]]:
        statement = build_search_query(query)
        with translate_errors():
            rows = self._conn.execute(statement, tuple(bindings or ())).fetchall()
        return [row_to_search_result(r, query.result_column) for r in rows]

    def traverse(self, source: Identifier, config: TraversalConfig) -> list[GraphData]:
        """Breadth-first walk from *source*, shallowest depth per row first.

        Unbounded walks (``max_depth=None``) grow quadratically on cyclic
        graphs; set ``config.max_depth`` for large graphs.
        """
        _require_identifier(source, "source")
        statement = build_traversal_query(config)
        params = {"source": source, "max_depth": config.max_depth}
        with translate_errors():
            rows = self._conn.execute(statement, params).fetchall()
        return [row_to_graph_data(r, config.with_bodies) for r in rows]

    # ── lifecycle ──

    def close(self) -> None:
        self._conn.close()
        logger.info("closed graph database at %s", self._db_path)

    def __enter__(self) -> "SQLiteGraphDatabase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_graph(database: str | None = None) -> SQLiteGraphDatabase:
    """Open a graph database; in-memory unless *database* names a file."""
    return SQLiteGraphDatabase(db_path=database or MEMORY)
