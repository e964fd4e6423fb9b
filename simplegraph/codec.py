"""Result decoder: JSON in and out of the store, rows into graph records."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from simplegraph.domain.errors import DatabaseError, ValidationError
from simplegraph.domain.models import EdgeData, GraphData, NodeData
from simplegraph.query.render import NODE_TAG


def encode_json(data: Any) -> str:
    """Serialize *data* for storage.

    Key order is preserved and separators are compact, so the same body
    always produces the same text.
    """
    try:
        return json.dumps(data, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ValidationError("invalid JSON data", code="INVALID_JSON") from exc


def encode_object(data: Any) -> str:
    if not isinstance(data, Mapping):
        raise ValidationError(
            "JSON object expected",
            code="INVALID_JSON",
            details={"type": type(data).__name__},
        )
    return encode_json(dict(data))


def decode_json(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise DatabaseError("corrupted stored data", code="CORRUPTED_DATA") from exc


def decode_properties(text: str | bytes | None) -> dict[str, Any]:
    return decode_json(text) if text else {}


def row_to_edge(row: Mapping[str, Any]) -> EdgeData:
    return EdgeData(
        source=row["source"],
        target=row["target"],
        properties=decode_properties(row["properties"]),
    )


def row_to_search_result(row: Sequence[Any], result_column: str) -> dict[str, Any]:
    if result_column == "id":
        return {"id": row[0]}
    return decode_json(row[0])


def row_to_graph_data(row: Mapping[str, Any], with_bodies: bool) -> GraphData:
    depth = row["level"]
    if not with_bodies:
        return GraphData(node=NodeData(identifier=row["x"], body={}), depth=depth)

    if row["y"] == NODE_TAG:
        return GraphData(
            node=NodeData(identifier=row["x"], body=decode_json(row["obj"])),
            depth=depth,
        )
    return GraphData(
        edge=EdgeData(
            source=row["src"],
            target=row["tgt"],
            properties=decode_properties(row["obj"]),
        ),
        depth=depth,
    )
