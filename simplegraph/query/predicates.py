"""Predicate builder: a :class:`WhereClause` becomes one boolean SQL fragment."""

from __future__ import annotations

import logging

from simplegraph.domain.errors import ValidationError
from simplegraph.domain.models import WhereClause
from simplegraph.query.ast import (
    IdEquals,
    JsonPathCompare,
    Predicate,
    Test,
    TreeValueCompare,
)
from simplegraph.query.render import render

logger = logging.getLogger(__name__)


def to_predicate(clause: WhereClause) -> Predicate:
    """Translate a declarative clause into a predicate AST node."""
    selected = [clause.id_lookup, clause.key_value, clause.tree].count(True)
    if selected != 1:
        raise ValidationError(
            "exactly one of id_lookup, key_value or tree must be set",
            code="INVALID_WHERE_CLAUSE",
        )

    test: Test
    if clause.id_lookup:
        test = IdEquals()
    elif clause.key_value:
        if not clause.key:
            raise ValidationError("key-value search requires a key", code="MISSING_KEY")
        test = JsonPathCompare(key=clause.key, op=clause.predicate or "=")
    else:
        test = TreeValueCompare(key=clause.key, op=clause.predicate or "=")

    return Predicate(test=test, connector=clause.and_or)


def build_where_clause(clause: WhereClause) -> str:
    """Render *clause* as SQL with ``?`` placeholders; values are bound separately."""
    fragment = render(to_predicate(clause))
    logger.debug("where fragment: %s", fragment)
    return fragment
