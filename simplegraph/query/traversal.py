"""Traversal query builder: breadth-first expansion as a recursive CTE.

The generated query binds two named parameters, ``:source`` (the seed id)
and ``:max_depth``; everything else varies only structurally.

Each row carries a depth counter.  Edge steps only admit rows while
``depth`` is below the bound, so the fixed point is reached even on cyclic
graphs: with no configured bound the node count is used, since no shortest
path can be longer.  The outer select keeps the smallest depth at which each
row was produced.

With payloads, rows are tagged ``()`` for nodes and ``<-`` / ``->`` for edges
met while expanding inbound / outbound.  Edge rows keep the edge's own
``source`` and ``target`` columns, so an edge found while walking inbound is
never reported reversed.
"""

from __future__ import annotations

import logging

from simplegraph.domain.errors import ValidationError
from simplegraph.domain.models import TraversalConfig
from simplegraph.query.ast import EdgeStep, NodeStep, SeedStep, Step, Traversal
from simplegraph.query.render import render

logger = logging.getLogger(__name__)


def validate_max_depth(max_depth: int | None) -> None:
    if max_depth is None:
        return
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise ValidationError(
            "max_depth must be a non-negative integer",
            code="INVALID_MAX_DEPTH",
            details={"max_depth": max_depth},
        )


def to_traversal(config: TraversalConfig) -> Traversal:
    validate_max_depth(config.max_depth)
    steps: list[Step] = [SeedStep(), NodeStep()]
    if config.inbound:
        steps.append(EdgeStep("in"))
    if config.outbound:
        steps.append(EdgeStep("out"))
    return Traversal(
        steps=tuple(steps),
        with_bodies=bool(config.with_bodies),
        bounded=config.max_depth is not None,
    )


def build_traversal_query(config: TraversalConfig) -> str:
    sql = render(to_traversal(config))
    logger.debug("traversal query: %s", sql)
    return sql
