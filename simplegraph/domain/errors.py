"""Domain error taxonomy.

Four disjoint kinds, each a subclass of :class:`GraphError`:

- ``ValidationError``  caller input is structurally invalid; always raised
  before the database is touched.
- ``ConstraintError``  the write would violate node-id uniqueness or edge
  referential integrity; detected by the database.
- ``NotFoundError``    a targeted update/delete matched zero rows.
- ``DatabaseError``    anything else coming from the engine, including
  corrupted stored JSON.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONSTRAINT = "constraint"
    NOT_FOUND = "not_found"
    DATABASE = "database"


class GraphError(Exception):
    """
    Base exception for graph database errors.

    Attributes:
        message: Human-readable description.
        code: Machine-readable, UPPER_SNAKE_CASE error code.
        details: Additional machine context (ids, lengths, engine error name).
    """

    kind: ErrorKind = ErrorKind.DATABASE

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = self.message or self.__class__.__name__
        if self.code:
            base += f" [code={self.code}]"
        if self.details:
            base += f" details={self.details}"
        return base


class ValidationError(GraphError):
    """Caller-supplied input is invalid."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "VALIDATION_ERROR")
        super().__init__(message, **kw)


class ConstraintError(GraphError):
    """Uniqueness or referential-integrity violation."""

    kind = ErrorKind.CONSTRAINT

    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "CONSTRAINT_VIOLATION")
        super().__init__(message, **kw)


class NotFoundError(GraphError):
    """A targeted mutation matched no existing row."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "NOT_FOUND")
        super().__init__(message, **kw)


class DatabaseError(GraphError):
    """Engine failure unrelated to caller input."""

    kind = ErrorKind.DATABASE

    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "DATABASE_ERROR")
        super().__init__(message, **kw)
