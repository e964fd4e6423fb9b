"""Map ``sqlite3`` failures onto the domain error taxonomy."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from simplegraph.domain.errors import ConstraintError, DatabaseError, GraphError

logger = logging.getLogger(__name__)


def _error_name(exc: sqlite3.Error) -> str:
    # ``sqlite_errorname`` exists on Python 3.11+; the message is always there.
    name = getattr(exc, "sqlite_errorname", None)
    if name:
        return name
    message = str(exc)
    if "UNIQUE constraint failed" in message:
        return "SQLITE_CONSTRAINT_UNIQUE"
    if "FOREIGN KEY constraint failed" in message:
        return "SQLITE_CONSTRAINT_FOREIGNKEY"
    return ""


def map_sqlite_error(exc: sqlite3.Error) -> GraphError:
    """Classify *exc*; anything unrecognised becomes a :class:`DatabaseError`."""
    name = _error_name(exc)
    details = {"sqlite_error": name or type(exc).__name__}

    if name in ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"):
        return ConstraintError("duplicate node id", code="DUPLICATE_NODE", details=details)
    if name == "SQLITE_CONSTRAINT_FOREIGNKEY":
        return ConstraintError(
            "endpoint node does not exist", code="MISSING_ENDPOINT", details=details
        )
    return DatabaseError(str(exc), details=details)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise ``sqlite3`` errors from the block as domain errors."""
    try:
        yield
    except sqlite3.Error as exc:
        mapped = map_sqlite_error(exc)
        logger.warning("sqlite failure mapped to %s: %s", type(mapped).__name__, exc)
        raise mapped from exc
