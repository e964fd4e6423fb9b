"""simplegraph: a graph database of JSON documents on SQLite."""

from simplegraph.adapters.stores.sqlite_graph import SQLiteGraphDatabase, create_graph
from simplegraph.domain.errors import (
    ConstraintError,
    DatabaseError,
    ErrorKind,
    GraphError,
    NotFoundError,
    ValidationError,
)
from simplegraph.domain.models import (
    EdgeData,
    GraphData,
    NodeData,
    SearchQuery,
    TraversalConfig,
    WhereClause,
)
from simplegraph.query import build_search_query, build_traversal_query, build_where_clause

__all__ = [
    "SQLiteGraphDatabase",
    "create_graph",
    "ConstraintError",
    "DatabaseError",
    "ErrorKind",
    "GraphError",
    "NotFoundError",
    "ValidationError",
    "EdgeData",
    "GraphData",
    "NodeData",
    "SearchQuery",
    "TraversalConfig",
    "WhereClause",
    "build_search_query",
    "build_traversal_query",
    "build_where_clause",
]
