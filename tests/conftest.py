"""Shared test fixtures: fresh in-memory graphs and sample data."""

from __future__ import annotations

import pytest

from simplegraph import create_graph


@pytest.fixture
def graph():
    g = create_graph()
    yield g
    g.close()


@pytest.fixture
def users_graph(graph):
    """Three users and no edges."""
    graph.add_node({"name": "Alice"}, "user-1")
    graph.add_node({"name": "Bob"}, "user-2")
    graph.add_node({"name": "Charlie"}, "user-3")
    return graph


@pytest.fixture
def people_graph(graph):
    """Four people with roles and levels, for search tests."""
    graph.add_node({"name": "Alice", "role": "engineer", "level": 3}, "user-1")
    graph.add_node({"name": "Bob", "role": "designer", "level": 2}, "user-2")
    graph.add_node({"name": "Charlie", "role": "engineer", "level": 1}, "user-3")
    graph.add_node({"name": "David", "role": "manager", "level": 4}, "user-4")
    return graph


@pytest.fixture
def project_graph(graph):
    """user-1 -> user-2 -> user-3 -> user-4, and user-1 -> project-1 -> user-3."""
    graph.add_node({"name": "Alice"}, "user-1")
    graph.add_node({"name": "Bob"}, "user-2")
    graph.add_node({"name": "Charlie"}, "user-3")
    graph.add_node({"name": "David"}, "user-4")
    graph.add_node({"title": "Project Alpha"}, "project-1")

    graph.connect_nodes("user-1", "user-2")
    graph.connect_nodes("user-2", "user-3")
    graph.connect_nodes("user-3", "user-4")
    graph.connect_nodes_with_properties("user-1", "project-1", {"role": "lead"})
    graph.connect_nodes("project-1", "user-3")
    return graph


@pytest.fixture
def chain_graph(graph):
    """a -> b -> c"""
    graph.add_nodes([{"id": "a"}, {"id": "b"}, {"id": "c"}])
    graph.bulk_connect_nodes(["a", "b"], ["b", "c"])
    return graph
