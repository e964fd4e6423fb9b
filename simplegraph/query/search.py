"""Search query builder."""

from __future__ import annotations

import logging

from simplegraph.domain.models import SearchQuery
from simplegraph.query.ast import JsonTreeSource, Select
from simplegraph.query.render import render

logger = logging.getLogger(__name__)


def to_select(query: SearchQuery) -> Select:
    tree = JsonTreeSource(key=query.key) if query.tree else None
    return Select(
        column=query.result_column or "body",
        tree=tree,
        where=tuple(query.search_clauses or ()),
    )


def build_search_query(query: SearchQuery) -> str:
    """Compose ``SELECT <col> FROM nodes [, json_tree(...)] [WHERE ...]``.

    Fragments are joined with single spaces in the order given; callers put
    any ``AND``/``OR``/``NOT`` connectors inside the fragments themselves.
    Fragments may be plain SQL strings or :class:`Predicate` nodes.
    """
    sql = render(to_select(query))
    logger.debug("search query: %s", sql)
    return sql
