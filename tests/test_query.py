"""Tests for the SQL builders (pure string functions, no database)."""

import pytest

from simplegraph.domain.errors import ValidationError
from simplegraph.domain.models import SearchQuery, TraversalConfig, WhereClause
from simplegraph.query import build_search_query, build_traversal_query, build_where_clause
from simplegraph.query.ast import IdEquals, JsonPathCompare, Predicate, validate_json_key


class TestWhereClause:
    def test_id_lookup(self):
        assert build_where_clause(WhereClause(id_lookup=True)) == "nodes.id = ?"

    def test_key_value_default_equals(self):
        sql = build_where_clause(WhereClause(key_value=True, key="role"))
        assert sql == "json_extract(body, '$.role') = ?"

    def test_key_value_with_connector_and_comparison(self):
        clause = WhereClause(key_value=True, key="level", predicate=">", and_or="AND")
        assert build_where_clause(clause) == "AND json_extract(body, '$.level') > ?"

    def test_dotted_key(self):
        sql = build_where_clause(WhereClause(key_value=True, key="address.city", predicate="LIKE"))
        assert sql == "json_extract(body, '$.address.city') LIKE ?"

    def test_tree_without_key(self):
        assert build_where_clause(WhereClause(tree=True)) == "json_tree.value = ?"

    def test_tree_scoped_to_key(self):
        clause = WhereClause(tree=True, key="city", and_or="OR")
        assert build_where_clause(clause) == (
            "OR (json_tree.key = 'city' AND json_tree.value = ?)"
        )

    def test_no_values_are_embedded(self):
        sql = build_where_clause(WhereClause(key_value=True, key="name"))
        assert sql.count("?") == 1

    @pytest.mark.parametrize(
        "key",
        ["name'; DROP TABLE nodes; --", "a b", "$.name", "a..b", "", ".a", "name\n"],
    )
    def test_unsafe_keys_rejected(self, key):
        with pytest.raises(ValidationError):
            build_where_clause(WhereClause(key_value=True, key=key))

    def test_key_value_requires_key(self):
        with pytest.raises(ValidationError):
            build_where_clause(WhereClause(key_value=True))

    def test_exactly_one_kind(self):
        with pytest.raises(ValidationError):
            build_where_clause(WhereClause())
        with pytest.raises(ValidationError):
            build_where_clause(WhereClause(id_lookup=True, tree=True))

    def test_unknown_comparison(self):
        with pytest.raises(ValidationError):
            build_where_clause(WhereClause(key_value=True, key="a", predicate="!="))

    def test_unknown_connector(self):
        with pytest.raises(ValidationError):
            build_where_clause(WhereClause(id_lookup=True, and_or="XOR"))

    def test_validate_json_key_returns_key(self):
        assert validate_json_key("a_1.b2") == "a_1.b2"


class TestSearchQuery:
    def test_default_full_scan(self):
        assert build_search_query(SearchQuery()) == "SELECT body FROM nodes"

    def test_id_column(self):
        assert build_search_query(SearchQuery(result_column="id")) == "SELECT id FROM nodes"

    def test_tree_expansion(self):
        assert build_search_query(SearchQuery(tree=True)) == (
            "SELECT nodes.body FROM nodes, json_tree(body)"
        )

    def test_tree_expansion_with_key(self):
        sql = build_search_query(SearchQuery(result_column="id", tree=True, key="tags"))
        assert sql == "SELECT nodes.id FROM nodes, json_tree(body, '$.tags')"

    def test_fragments_joined_in_order(self):
        query = SearchQuery(
            search_clauses=[
                "json_extract(body, '$.role') = ?",
                "AND json_extract(body, '$.level') > ?",
            ]
        )
        assert build_search_query(query) == (
            "SELECT body FROM nodes WHERE json_extract(body, '$.role') = ? "
            "AND json_extract(body, '$.level') > ?"
        )

    def test_predicate_nodes_accepted(self):
        query = SearchQuery(
            search_clauses=[
                Predicate(IdEquals()),
                Predicate(JsonPathCompare("name"), connector="OR"),
            ]
        )
        assert build_search_query(query) == (
            "SELECT body FROM nodes WHERE nodes.id = ? OR json_extract(body, '$.name') = ?"
        )

    def test_deterministic(self):
        query = SearchQuery(tree=True, key="a", search_clauses=["json_tree.value = ?"])
        assert build_search_query(query) == build_search_query(query)

    def test_unknown_column(self):
        with pytest.raises(ValidationError):
            build_search_query(SearchQuery(result_column="properties"))

    def test_unsafe_tree_key(self):
        with pytest.raises(ValidationError):
            build_search_query(SearchQuery(tree=True, key="x') --"))


class TestTraversalQuery:
    def test_seed_only(self):
        sql = build_traversal_query(TraversalConfig())
        assert sql.startswith("WITH RECURSIVE traverse(x, depth) AS (")
        assert "SELECT id, 0 FROM nodes WHERE id = :source" in sql
        assert "SELECT id, depth FROM nodes JOIN traverse ON id = x" in sql
        assert "FROM edges" not in sql

    def test_outbound(self):
        sql = build_traversal_query(TraversalConfig(outbound=True))
        assert "SELECT target, depth + 1 FROM edges JOIN traverse ON source = x" in sql
        assert "ON target = x" not in sql

    def test_inbound(self):
        sql = build_traversal_query(TraversalConfig(inbound=True))
        assert "SELECT source, depth + 1 FROM edges JOIN traverse ON target = x" in sql
        assert "ON source = x" not in sql

    def test_both_directions_with_bodies(self):
        sql = build_traversal_query(
            TraversalConfig(with_bodies=True, inbound=True, outbound=True)
        )
        assert "traverse(x, depth, y, obj, src, tgt)" in sql
        assert "'<-', properties, source, target" in sql
        assert "'->', properties, source, target" in sql
        assert "GROUP BY x, y, obj, src, tgt" in sql

    def test_unbounded_uses_node_count(self):
        sql = build_traversal_query(TraversalConfig(outbound=True))
        assert "depth < (SELECT COUNT(*) FROM nodes)" in sql
        assert ":max_depth" not in sql

    def test_bounded_uses_parameter(self):
        sql = build_traversal_query(TraversalConfig(outbound=True, inbound=True, max_depth=2))
        assert sql.count("depth < :max_depth") == 2
        assert "COUNT(*)" not in sql

    def test_only_bound_parameters(self):
        sql = build_traversal_query(TraversalConfig(outbound=True, max_depth=5))
        assert sql.count(":source") == 1
        assert "?" not in sql
        assert "5" not in sql

    @pytest.mark.parametrize("max_depth", [-1, 1.5, "2", True])
    def test_invalid_max_depth(self, max_depth):
        with pytest.raises(ValidationError):
            build_traversal_query(TraversalConfig(outbound=True, max_depth=max_depth))
