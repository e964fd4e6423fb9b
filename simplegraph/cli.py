"""simplegraph command-line interface."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterator

import click

from simplegraph.domain.errors import GraphError


def _parse_json(value: str, what: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as exc:
        raise click.BadParameter(f"{what} is not valid JSON: {exc}") from exc


def _scalar(value: str) -> Any:
    """Bind numbers, booleans and null as such; anything else as text."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return value
    return parsed if not isinstance(parsed, (dict, list)) else value


def _echo(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@contextmanager
def _graph(ctx: click.Context) -> Iterator[Any]:
    """Open the configured graph and turn domain errors into CLI errors."""
    from simplegraph.adapters.stores.sqlite_graph import SQLiteGraphDatabase
    from simplegraph.config import build_graph, build_graph_database

    db = ctx.obj["db"]
    config = ctx.obj["config"]
    try:
        if db:
            graph = SQLiteGraphDatabase(db_path=db)
        elif Path(config).exists():
            graph = build_graph(config)
        else:
            graph = build_graph_database({})
    except GraphError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        yield graph
    except GraphError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        graph.close()


@click.group()
@click.option("--config", "-c", default="config.yaml", help="Path to config YAML.")
@click.option("--db", default=None, help="SQLite database file (overrides config).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str, db: str | None, verbose: bool) -> None:
    """simplegraph: a graph database of JSON documents on SQLite."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["db"] = db


# ── nodes ──


@main.command("add-node")
@click.argument("body")
@click.option("--id", "identifier", default=None, help="Node id (overrides body.id).")
@click.pass_context
def add_node(ctx: click.Context, body: str, identifier: str | None) -> None:
    """Add a node from a JSON object BODY."""
    data = _parse_json(body, "BODY")
    with _graph(ctx) as graph:
        graph.add_node(data, identifier)
    click.echo("Node added.")


@main.command()
@click.argument("identifier")
@click.pass_context
def find(ctx: click.Context, identifier: str) -> None:
    """Print the body of node IDENTIFIER."""
    with _graph(ctx) as graph:
        node = graph.find_node(identifier)
    if node is None:
        raise click.ClickException(f"Node not found: {identifier}")
    _echo(node)


@main.command()
@click.argument("identifier")
@click.argument("body")
@click.pass_context
def update(ctx: click.Context, identifier: str, body: str) -> None:
    """Replace the body of node IDENTIFIER."""
    data = _parse_json(body, "BODY")
    with _graph(ctx) as graph:
        graph.update_node_body(identifier, data)
    click.echo("Node updated.")


@main.command()
@click.argument("identifier")
@click.argument("body")
@click.pass_context
def upsert(ctx: click.Context, identifier: str, body: str) -> None:
    """Insert node IDENTIFIER, or merge BODY's top-level keys into it."""
    data = _parse_json(body, "BODY")
    with _graph(ctx) as graph:
        graph.upsert_node(identifier, data)
    click.echo("Node upserted.")


@main.command()
@click.argument("identifiers", nargs=-1, required=True)
@click.pass_context
def remove(ctx: click.Context, identifiers: tuple[str, ...]) -> None:
    """Remove one or more nodes and every edge touching them."""
    with _graph(ctx) as graph:
        if len(identifiers) == 1:
            graph.remove_node(identifiers[0])
        else:
            graph.remove_nodes(list(identifiers))
    click.echo(f"Removed {len(identifiers)} node(s).")


# ── edges ──


@main.command()
@click.argument("source")
@click.argument("target")
@click.option("--properties", "-p", default=None, help="Edge properties as a JSON object.")
@click.pass_context
def connect(ctx: click.Context, source: str, target: str, properties: str | None) -> None:
    """Add an edge SOURCE -> TARGET."""
    props = _parse_json(properties, "--properties") if properties else None
    with _graph(ctx) as graph:
        if props is None:
            graph.connect_nodes(source, target)
        else:
            graph.connect_nodes_with_properties(source, target, props)
    click.echo(f"Connected {source} -> {target}.")


@main.command()
@click.argument("identifier")
@click.option("--direction", "-d", default="all",
              type=click.Choice(["all", "in", "out"]),
              help="Which edges to list.")
@click.pass_context
def connections(ctx: click.Context, identifier: str, direction: str) -> None:
    """List the edges touching node IDENTIFIER."""
    with _graph(ctx) as graph:
        if direction == "in":
            edges = graph.connections_in(identifier)
        elif direction == "out":
            edges = graph.connections_out(identifier)
        else:
            edges = graph.connections(identifier)
    _echo([asdict(e) for e in edges])


# ── search / traversal ──


@main.command()
@click.option("--key", "-k", default=None, help="JSON path key to compare.")
@click.option("--value", default=None, help="Value to compare against.")
@click.option("--op", default="=", type=click.Choice(["=", "LIKE", ">", "<"]))
@click.option("--tree", is_flag=True, help="Match values anywhere in the document.")
@click.option("--id-only", is_flag=True, help="Print ids instead of bodies.")
@click.pass_context
def search(
    ctx: click.Context,
    key: str | None,
    value: str | None,
    op: str,
    tree: bool,
    id_only: bool,
) -> None:
    """Find nodes whose KEY compares to VALUE (all nodes without a filter)."""
    from simplegraph.domain.models import SearchQuery, WhereClause
    from simplegraph.query import build_where_clause

    clauses: list[str] = []
    bindings: list[Any] = []
    with _graph(ctx) as graph:
        if value is not None:
            if tree:
                clause = WhereClause(tree=True, key=key, predicate=op)
            else:
                if key is None:
                    raise click.UsageError("--key is required unless --tree is given.")
                clause = WhereClause(key_value=True, key=key, predicate=op)
            clauses.append(build_where_clause(clause))
            bindings.append(_scalar(value))
        # Without a value, --key scopes the tree walk to that path.
        query = SearchQuery(
            result_column="id" if id_only else "body",
            key=key if tree and value is None else None,
            tree=tree,
            search_clauses=clauses,
        )
        results = graph.find_nodes(query, bindings)
    _echo(results)


@main.command()
@click.argument("identifier")
@click.option("--inbound", is_flag=True, help="Follow edges into reached nodes.")
@click.option("--outbound", is_flag=True, help="Follow edges out of reached nodes.")
@click.option("--with-bodies", is_flag=True, help="Include node bodies and edges.")
@click.option("--max-depth", type=int, default=None, help="Stop after N hops.")
@click.pass_context
def traverse(
    ctx: click.Context,
    identifier: str,
    inbound: bool,
    outbound: bool,
    with_bodies: bool,
    max_depth: int | None,
) -> None:
    """Walk the graph breadth-first from node IDENTIFIER."""
    from simplegraph.domain.models import TraversalConfig

    config = TraversalConfig(
        with_bodies=with_bodies,
        inbound=inbound,
        outbound=outbound,
        max_depth=max_depth,
    )
    with _graph(ctx) as graph:
        rows = graph.traverse(identifier, config)
    _echo([asdict(r) for r in rows])


if __name__ == "__main__":
    main()
