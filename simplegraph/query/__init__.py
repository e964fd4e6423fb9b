"""SQL builders for node search and graph traversal."""

from simplegraph.query.predicates import build_where_clause
from simplegraph.query.search import build_search_query
from simplegraph.query.traversal import build_traversal_query

__all__ = ["build_where_clause", "build_search_query", "build_traversal_query"]
