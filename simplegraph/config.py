"""Configuration loading and adapter factory.

Reads a YAML config file and instantiates the graph database adapter it
names.  ``SIMPLEGRAPH_DB_PATH`` (from the environment or a project ``.env``)
overrides the configured database path.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from simplegraph.adapters.stores.sqlite_graph import MEMORY, SQLiteGraphDatabase
from simplegraph.ports.graph_database import GraphDatabasePort

# Walk up from this file (simplegraph/config.py) to the project root and load .env
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

logger = logging.getLogger(__name__)

DB_PATH_ENV = "SIMPLEGRAPH_DB_PATH"


def load_config(path: str = "config.yaml") -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(p) as f:
        return yaml.safe_load(f) or {}


def build_graph_database(cfg: dict[str, Any], *, config_dir: str = ".") -> GraphDatabasePort:
    adapter = cfg.get("adapter", "sqlite")
    db_path = os.environ.get(DB_PATH_ENV) or cfg.get("path", MEMORY)
    journal_mode = cfg.get("journal_mode", "WAL")

    if adapter == "sqlite":
        if db_path != MEMORY:
            db_path = str((Path(config_dir) / db_path).resolve())
        return SQLiteGraphDatabase(db_path=db_path, journal_mode=journal_mode)

    raise ValueError(f"Unknown graph adapter: {adapter}")


def build_graph(config_path: str = "config.yaml") -> GraphDatabasePort:
    """Load config and build the graph database it describes."""
    cfg = load_config(config_path)
    config_parent = str(Path(config_path).resolve().parent)

    logger.info("  → building graph database …")
    graph = build_graph_database(cfg.get("graph", {}), config_dir=config_parent)
    logger.info("  ✓ graph database ready")
    return graph
