"""
Tests for alias normalization and option lifting
"""

import pytest

from actions.normalizer import lift_options, normalize

REINDEX_ALIASES = {"table": "name", "tableName": "name", "indexName": "name"}


class TestNormalize:

    def test_alias_fills_canonical(self):
        assert normalize({"target": "table", "tableName": "orders"}, REINDEX_ALIASES) == {
            "target": "table",
            "name": "orders",
        }

    def test_canonical_never_overwritten(self):
        result = normalize({"name": "orders", "indexName": "orders_pkey"}, REINDEX_ALIASES)
        assert result == {"name": "orders"}

    def test_first_alias_in_table_order_wins(self):
        result = normalize({"indexName": "idx", "table": "orders"}, REINDEX_ALIASES)
        assert result["name"] == "orders"
        assert "indexName" not in result

    def test_none_canonical_is_filled(self):
        result = normalize({"name": None, "tableName": "orders"}, REINDEX_ALIASES)
        assert result["name"] == "orders"

    def test_unknown_fields_pass_through(self):
        result = normalize({"name": "orders", "bogus": 1}, REINDEX_ALIASES)
        assert result["bogus"] == 1

    def test_input_not_mutated(self):
        raw = {"tableName": "orders", "options": {"concurrently": True}}
        snapshot = {"tableName": "orders", "options": {"concurrently": True}}
        normalize(raw, REINDEX_ALIASES)
        assert raw == snapshot

    @pytest.mark.parametrize("raw", [
        {},
        {"tableName": "orders"},
        {"name": "a", "table": "b", "indexName": "c"},
        {"options": {"tableName": "orders", "concurrently": True}},
        {"options": {"options": {"full": True}}, "target": "t"},
        {"options": "not-a-mapping"},
    ])
    def test_idempotent(self, raw):
        once = normalize(raw, REINDEX_ALIASES)
        assert normalize(once, REINDEX_ALIASES) == once

    def test_none_input(self):
        assert normalize(None, REINDEX_ALIASES) == {}


class TestLiftOptions:

    def test_nested_flags_lifted(self):
        result = lift_options({"target": "orders", "options": {"full": True, "verbose": True}})
        assert result == {"target": "orders", "full": True, "verbose": True}

    def test_top_level_wins(self):
        result = lift_options({"full": False, "options": {"full": True}})
        assert result == {"full": False}

    def test_non_mapping_options_left_in_place(self):
        result = lift_options({"options": ["full"]})
        assert result == {"options": ["full"]}

    def test_nested_options_key_dropped(self):
        result = lift_options({"options": {"options": {"full": True}, "verbose": True}})
        assert result == {"verbose": True}

    def test_aliases_inside_options_are_resolved(self):
        result = normalize({"options": {"isolationLevel": "serializable"}}, {"isolationLevel": "isolation_level"})
        assert result == {"isolation_level": "serializable"}
