"""SQLite schema and fixed statements for the graph store."""

SCHEMA = """
CREATE TABLE IF NOT EXISTS nodes (
    body TEXT,
    id   TEXT GENERATED ALWAYS AS (json_extract(body, '$.id')) VIRTUAL NOT NULL UNIQUE
);
CREATE INDEX IF NOT EXISTS id_idx ON nodes(id);

CREATE TABLE IF NOT EXISTS edges (
    source     TEXT,
    target     TEXT,
    properties TEXT,
    UNIQUE(source, target, properties) ON CONFLICT REPLACE,
    FOREIGN KEY (source) REFERENCES nodes(id),
    FOREIGN KEY (target) REFERENCES nodes(id)
);
CREATE INDEX IF NOT EXISTS source_idx ON edges(source);
CREATE INDEX IF NOT EXISTS target_idx ON edges(target);
"""

INSERT_NODE = "INSERT INTO nodes (body) VALUES (json(?))"
UPDATE_NODE = "UPDATE nodes SET body = json(?) WHERE id = ?"
DELETE_NODE = "DELETE FROM nodes WHERE id = ?"

INSERT_EDGE = "INSERT INTO edges (source, target, properties) VALUES (?, ?, json(?))"
DELETE_EDGES = "DELETE FROM edges WHERE source = ? OR target = ?"

SEARCH_EDGES = "SELECT source, target, properties FROM edges WHERE source = ? OR target = ?"
SEARCH_EDGES_INBOUND = "SELECT source, target, properties FROM edges WHERE target = ?"
SEARCH_EDGES_OUTBOUND = "SELECT source, target, properties FROM edges WHERE source = ?"

# Multiple recursive SELECTs in one CTE arrived in 3.34.0.
MIN_SQLITE_VERSION = (3, 34, 0)
