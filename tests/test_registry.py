"""
Tests for the action registry: lookup, the fixed dispatch pipeline, and the
end-to-end scenarios callers rely on.
"""

import logging

import pytest

from actions.catalog import ALL_SPECS, get_registry
from actions.errors import NotFoundError, UnsafeFragmentError, ValidationError
from actions.registry import ActionRegistry
from actions.specs import ActionSpec, BuiltStatement, FieldDef


class TestScenarios:

    def test_vacuum_full_verbose(self, registry):
        statement = registry.dispatch(
            "admin", "vacuum", {"target": "orders", "options": {"full": True, "verbose": True}}
        )
        assert statement.sql == 'VACUUM (FULL, VERBOSE) "orders"'

    def test_savepoint(self, registry):
        assert registry.dispatch("tx", "savepoint", {"name": "sp1"}).sql == 'SAVEPOINT "sp1"'

    def test_release_without_name(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            registry.dispatch("tx", "release", {})
        assert exc_info.value.field == "name"

    def test_where_with_stacked_drop(self, registry):
        with pytest.raises(UnsafeFragmentError) as exc_info:
            registry.dispatch("query", "count", {"table": "users", "where": "1=1; DROP TABLE users;--"})
        assert exc_info.value.field == "where"
        assert "statement terminator followed by dangerous keyword" in exc_info.value.reason

    def test_reindex_database_without_name(self, registry):
        assert registry.dispatch("admin", "reindex", {"target": "database"}).sql == "REINDEX DATABASE"

    def test_reindex_table_without_name(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            registry.dispatch("admin", "reindex", {"target": "table"})
        assert exc_info.value.field == "name"

    def test_unregistered_sub_action(self, registry):
        with pytest.raises(NotFoundError) as exc_info:
            registry.dispatch("admin", "defragment", {})
        assert "vacuum" in exc_info.value.reason
        assert exc_info.value.extra["valid_actions"] == registry.describe("admin")

    def test_unregistered_kind(self, registry):
        with pytest.raises(NotFoundError) as exc_info:
            registry.dispatch("backup", "create", {})
        assert "query" in exc_info.value.reason


class TestPipeline:

    def test_unsafe_definition_rejected(self, registry):
        with pytest.raises(UnsafeFragmentError) as exc_info:
            registry.dispatch("schema", "create", {
                "target": "table", "name": "t", "definition": "id int); DROP TABLE users; --",
            })
        assert exc_info.value.field == "definition"

    def test_empty_where_rejected(self, registry):
        with pytest.raises(UnsafeFragmentError) as exc_info:
            registry.dispatch("query", "exists", {"table": "orders", "where": "   "})
        assert exc_info.value.pattern_reason == "must be a non-empty string"

    def test_validation_runs_before_pattern_check(self, registry):
        # unknown field is reported even though where is unsafe
        with pytest.raises(ValidationError):
            registry.dispatch("query", "count", {"table": "t", "where": "1=1 --", "bogus": 1})

    def test_schema_qualified_name_hint(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            registry.dispatch("admin", "vacuum", {"target": "sales.orders"})
        assert "'schema' field" in exc_info.value.reason

    def test_rejections_logged_as_warning(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="actions.registry"):
            with pytest.raises(UnsafeFragmentError):
                registry.dispatch("query", "count", {"table": "t", "where": "pg_sleep(5) IS NULL"})
        assert "rejected unsafe 'where'" in caplog.text

    def test_builder_never_sees_invalid_input(self):
        calls = []
        registry = ActionRegistry()
        registry.register(
            ActionSpec("tx", "savepoint", required=(FieldDef("name", "identifier", free_text=True),)),
            lambda fields: calls.append(fields) or BuiltStatement("SAVEPOINT x"),
        )
        with pytest.raises(ValidationError):
            registry.dispatch("tx", "savepoint", {"name": "bad name"})
        assert calls == []

    def test_custom_normalizer_is_used(self):
        registry = ActionRegistry()
        registry.register(
            ActionSpec("tx", "commit"),
            lambda fields: BuiltStatement("COMMIT"),
            normalizer=lambda raw, aliases: {},
        )
        assert registry.dispatch("tx", "commit", {"anything": 1}).sql == "COMMIT"


class TestRegistration:

    def test_duplicate_rejected(self):
        registry = ActionRegistry()
        spec = ActionSpec("tx", "commit")
        registry.register(spec, lambda f: BuiltStatement("COMMIT"))
        with pytest.raises(ValueError):
            registry.register(spec, lambda f: BuiltStatement("COMMIT"))

    def test_frozen_registry_rejects_register(self, registry):
        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.register(ActionSpec("tx", "prepare"), lambda f: BuiltStatement("PREPARE TRANSACTION"))

    def test_describe_and_get_spec(self, registry):
        assert registry.describe("tx") == ["begin", "commit", "rollback", "savepoint", "release", "rollback_to"]
        assert registry.describe("nothing") == []
        assert registry.get_spec("admin", "reindex").aliases["indexName"] == "name"
        assert registry.get_spec("admin", "nope") is None

    def test_kinds(self, registry):
        assert registry.kinds() == ["admin", "monitor", "query", "schema", "tx"]

    def test_every_catalog_entry_registered(self, registry):
        for spec, _ in ALL_SPECS:
            assert registry.get_spec(spec.action_kind, spec.sub_action) is spec

    def test_default_registry_is_shared(self):
        assert get_registry() is get_registry()
