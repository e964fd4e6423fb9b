"""Render query AST nodes to SQL text.

This is the only place SQL text for dynamic queries is assembled.  Output is
deterministic for a given node.
"""

from __future__ import annotations

from functools import singledispatch

from simplegraph.query.ast import (
    EdgeStep,
    IdEquals,
    JsonPathCompare,
    JsonTreeSource,
    NodeStep,
    Predicate,
    SeedStep,
    Select,
    Traversal,
    TreeValueCompare,
)

TRAVERSAL_TABLE = "traverse"

# Node/edge kind tags carried in the ``y`` column.
NODE_TAG = "()"
INBOUND_TAG = "<-"
OUTBOUND_TAG = "->"


@singledispatch
def render(node) -> str:
    raise TypeError(f"cannot render {type(node).__name__}")


@render.register
def _(node: str) -> str:
    return node


# ── Predicates ──

@render.register
def _(node: IdEquals) -> str:
    return "nodes.id = ?"


@render.register
def _(node: JsonPathCompare) -> str:
    return f"json_extract(body, '$.{node.key}') {node.op} ?"


@render.register
def _(node: TreeValueCompare) -> str:
    if node.key is not None:
        return f"(json_tree.key = '{node.key}' AND json_tree.value {node.op} ?)"
    return f"json_tree.value {node.op} ?"


@render.register
def _(node: Predicate) -> str:
    text = render(node.test)
    if node.connector:
        return f"{node.connector} {text}"
    return text


# ── Select ──

@render.register
def _(node: JsonTreeSource) -> str:
    if node.key is not None:
        return f"json_tree(body, '$.{node.key}')"
    return "json_tree(body)"


@render.register
def _(node: Select) -> str:
    # json_tree has its own id column.
    column = f"nodes.{node.column}" if node.tree is not None else node.column
    sql = f"SELECT {column} FROM nodes"
    if node.tree is not None:
        sql += ", " + render(node.tree)
    if node.where:
        sql += " WHERE " + " ".join(render(part) for part in node.where)
    return sql


# ── Traversal ──

def _columns(with_bodies: bool) -> str:
    return "x, depth, y, obj, src, tgt" if with_bodies else "x, depth"


def _depth_bound(bounded: bool) -> str:
    # No shortest path is longer than the node count.
    return ":max_depth" if bounded else "(SELECT COUNT(*) FROM nodes)"


def _render_step(step, with_bodies: bool, bounded: bool) -> str:
    if isinstance(step, SeedStep):
        payload = f", '{NODE_TAG}', body, NULL, NULL" if with_bodies else ""
        return f"SELECT id, 0{payload} FROM nodes WHERE id = :source"

    if isinstance(step, NodeStep):
        payload = f", '{NODE_TAG}', body, NULL, NULL" if with_bodies else ""
        return f"SELECT id, depth{payload} FROM nodes JOIN {TRAVERSAL_TABLE} ON id = x"

    if isinstance(step, EdgeStep):
        if step.direction == "in":
            reached, joined, tag = "source", "target", INBOUND_TAG
        else:
            reached, joined, tag = "target", "source", OUTBOUND_TAG
        payload = f", '{tag}', properties, source, target" if with_bodies else ""
        return (
            f"SELECT {reached}, depth + 1{payload} FROM edges "
            f"JOIN {TRAVERSAL_TABLE} ON {joined} = x "
            f"WHERE depth < {_depth_bound(bounded)}"
        )

    raise TypeError(f"cannot render {type(step).__name__}")


@render.register
def _(node: Traversal) -> str:
    steps = "\n  UNION\n  ".join(
        _render_step(step, node.with_bodies, node.bounded) for step in node.steps
    )
    if node.with_bodies:
        outer = (
            f"SELECT x, y, obj, src, tgt, MIN(depth) AS level FROM {TRAVERSAL_TABLE}\n"
            "GROUP BY x, y, obj, src, tgt\n"
            "ORDER BY level"
        )
    else:
        outer = (
            f"SELECT x, MIN(depth) AS level FROM {TRAVERSAL_TABLE}\n"
            "GROUP BY x\n"
            "ORDER BY level"
        )
    return (
        f"WITH RECURSIVE {TRAVERSAL_TABLE}({_columns(node.with_bodies)}) AS (\n"
        f"  {steps}\n"
        f")\n"
        f"{outer}"
    )
