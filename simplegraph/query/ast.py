"""Query AST: predicate, select and recursive-traversal nodes.

Nodes are immutable and hold no parameter values, only structure.  The one
caller-supplied string that ends up inside SQL text is a JSON path key, and
it is checked against :data:`JSON_KEY_PATTERN` when the node is built.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Union

from simplegraph.domain.errors import ValidationError

JSON_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_]+(\.[A-Za-z0-9_]+)*$")

COMPARISONS = ("=", "LIKE", ">", "<")
CONNECTORS = ("AND", "OR", "NOT")
RESULT_COLUMNS = ("id", "body")


def validate_json_key(key: str) -> str:
    if not isinstance(key, str) or not JSON_KEY_PATTERN.fullmatch(key):
        raise ValidationError(
            "invalid JSON path key", code="INVALID_JSON_KEY", details={"key": key}
        )
    return key


def _validate_comparison(op: str) -> None:
    if op not in COMPARISONS:
        raise ValidationError(
            f"unsupported comparison: {op!r}",
            code="INVALID_COMPARISON",
            details={"allowed": list(COMPARISONS)},
        )


# ── Predicates ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class IdEquals:
    """``id = ?``"""


@dataclass(frozen=True)
class JsonPathCompare:
    """Compare a top-level (or dotted) path of the body to a bound value."""

    key: str
    op: str = "="

    def __post_init__(self) -> None:
        validate_json_key(self.key)
        _validate_comparison(self.op)


@dataclass(frozen=True)
class TreeValueCompare:
    """Compare any value met while walking ``json_tree``, optionally one key."""

    key: Optional[str] = None
    op: str = "="

    def __post_init__(self) -> None:
        if self.key is not None:
            validate_json_key(self.key)
        _validate_comparison(self.op)


Test = Union[IdEquals, JsonPathCompare, TreeValueCompare]


@dataclass(frozen=True)
class Predicate:
    """A test with an optional leading logical connector."""

    test: Test
    connector: Optional[str] = None

    def __post_init__(self) -> None:
        if self.connector is not None and self.connector not in CONNECTORS:
            raise ValidationError(
                f"unsupported connector: {self.connector!r}",
                code="INVALID_CONNECTOR",
                details={"allowed": list(CONNECTORS)},
            )


# ── Select ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class JsonTreeSource:
    """``json_tree(body)`` or ``json_tree(body, '$.<key>')`` joined to nodes."""

    key: Optional[str] = None

    def __post_init__(self) -> None:
        if self.key is not None:
            validate_json_key(self.key)


@dataclass(frozen=True)
class Select:
    """``SELECT <column> FROM nodes [, <tree>] [WHERE <fragments>]``."""

    column: str = "body"
    tree: Optional[JsonTreeSource] = None
    where: tuple[Union[str, Predicate], ...] = ()

    def __post_init__(self) -> None:
        if self.column not in RESULT_COLUMNS:
            raise ValidationError(
                f"unsupported result column: {self.column!r}",
                code="INVALID_RESULT_COLUMN",
                details={"allowed": list(RESULT_COLUMNS)},
            )


# ── Recursive traversal ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SeedStep:
    """The start node itself, depth 0."""


@dataclass(frozen=True)
class NodeStep:
    """Re-select the node row of every reached identifier."""


@dataclass(frozen=True)
class EdgeStep:
    """Follow edges pointing into (``in``) or out of (``out``) reached ids."""

    direction: Literal["in", "out"]


Step = Union[SeedStep, NodeStep, EdgeStep]


@dataclass(frozen=True)
class Traversal:
    """A ``WITH RECURSIVE`` fixed-point query over ``steps``.

    ``bounded`` selects whether the depth bound comes from the ``:max_depth``
    parameter or from the node count.
    """

    steps: tuple[Step, ...]
    with_bodies: bool = False
    bounded: bool = False
