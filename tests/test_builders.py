"""
Tests for statement builders, driven through the default registry so every
statement here went through normalization and validation first.
"""

import pytest

from actions.errors import UnsupportedCombinationError


def build(registry, kind, action, **fields):
    return registry.dispatch(kind, action, fields)


class TestMaintenanceBuilders:

    def test_vacuum_with_options(self, registry):
        statement = build(registry, "admin", "vacuum", target="orders", options={"full": True, "verbose": True})
        assert statement.sql == 'VACUUM (FULL, VERBOSE) "orders"'
        assert statement.params == ()

    def test_vacuum_option_order_is_fixed(self, registry):
        statement = build(registry, "admin", "vacuum", analyze=True, verbose=True, full=True, target="orders")
        assert statement.sql == 'VACUUM (FULL, VERBOSE, ANALYZE) "orders"'

    def test_vacuum_without_target(self, registry):
        assert build(registry, "admin", "vacuum").sql == "VACUUM"

    def test_vacuum_schema_and_alias(self, registry):
        statement = build(registry, "admin", "vacuum", tableName="orders", schema="sales", analyze=True)
        assert statement.sql == 'VACUUM (ANALYZE) "sales"."orders"'

    def test_analyze_columns(self, registry):
        statement = build(registry, "admin", "analyze", target="orders", columns=["id", "total"], verbose=True)
        assert statement.sql == 'ANALYZE (VERBOSE) "orders" ("id", "total")'

    def test_reindex_database_without_name(self, registry):
        assert build(registry, "admin", "reindex", target="database").sql == "REINDEX DATABASE"

    def test_reindex_index_alias_concurrently(self, registry):
        statement = build(registry, "admin", "reindex", target="index", indexName="orders_pkey", concurrently=True)
        assert statement.sql == 'REINDEX INDEX CONCURRENTLY "orders_pkey"'

    def test_reindex_schema(self, registry):
        assert build(registry, "admin", "reindex", target="schema", name="sales").sql == 'REINDEX SCHEMA "sales"'

    def test_stats_named_table_is_parameterized(self, registry):
        statement = build(registry, "admin", "stats", target="orders", schema="sales")
        assert statement.sql == "SELECT * FROM pg_stat_user_tables WHERE relname = $1 AND schemaname = $2"
        assert statement.params == ("orders", "sales")
        assert "orders" not in statement.sql

    def test_stats_listing_has_no_params(self, registry):
        statement = build(registry, "admin", "stats")
        assert "LIMIT 20" in statement.sql
        assert statement.params == ()

    def test_backend_control(self, registry):
        cancel = build(registry, "admin", "cancel_backend", processId=4242)
        assert cancel.sql == "SELECT pg_cancel_backend($1)"
        assert cancel.params == (4242,)
        terminate = build(registry, "admin", "terminate_backend", pid=7)
        assert terminate.sql == "SELECT pg_terminate_backend($1)"

    def test_set_config_binds_everything(self, registry):
        statement = build(registry, "admin", "set_config", name="work_mem", value="64MB", isLocal=True)
        assert statement.sql == "SELECT set_config($1, $2, $3)"
        assert statement.params == ("work_mem", "64MB", True)

    def test_reload_and_reset(self, registry):
        assert build(registry, "admin", "reload_conf").sql == "SELECT pg_reload_conf()"
        assert build(registry, "admin", "reset_stats").sql == "SELECT pg_stat_reset()"


class TestDdlBuilders:

    def test_create_table(self, registry):
        statement = build(
            registry, "schema", "create",
            target="table", name="orders", schema="sales", if_not_exists=True,
            definition="id serial PRIMARY KEY, total numeric NOT NULL",
        )
        assert statement.sql == (
            'CREATE TABLE IF NOT EXISTS "sales"."orders" (id serial PRIMARY KEY, total numeric NOT NULL)'
        )

    def test_create_index(self, registry):
        statement = build(
            registry, "schema", "create",
            target="index", name="orders_total_idx", schema="sales", definition="orders (total)",
        )
        assert statement.sql == 'CREATE INDEX "orders_total_idx" ON "sales".orders (total)'

    def test_create_view(self, registry):
        statement = build(registry, "schema", "create", target="view", name="big_orders",
                          definition="SELECT * FROM orders WHERE total > 100")
        assert statement.sql == 'CREATE VIEW "big_orders" AS SELECT * FROM orders WHERE total > 100'

    def test_create_view_if_not_exists_unsupported(self, registry):
        with pytest.raises(UnsupportedCombinationError):
            build(registry, "schema", "create", target="view", name="v", definition="SELECT 1", ifNotExists=True)

    def test_create_schema_needs_no_definition(self, registry):
        statement = build(registry, "schema", "create", target="schema", name="sales", if_not_exists=True)
        assert statement.sql == 'CREATE SCHEMA IF NOT EXISTS "sales"'

    def test_alter_table(self, registry):
        statement = build(registry, "schema", "alter", target="table", name="orders", ifExists=True,
                          definition="ADD COLUMN note text")
        assert statement.sql == 'ALTER TABLE IF EXISTS "orders" ADD COLUMN note text'

    def test_drop_with_cascade(self, registry):
        statement = build(registry, "schema", "drop", target="table", name="orders", schema="sales",
                          if_exists=True, cascade=True)
        assert statement.sql == 'DROP TABLE IF EXISTS "sales"."orders" CASCADE'

    def test_drop_schema(self, registry):
        assert build(registry, "schema", "drop", target="schema", name="sales").sql == 'DROP SCHEMA "sales"'

    @pytest.mark.parametrize("action, extra", [
        ("create", {"definition": "RETURNS int AS $$ SELECT 1 $$ LANGUAGE sql"}),
        ("alter", {"definition": "OWNER TO app"}),
        ("drop", {}),
    ])
    @pytest.mark.parametrize("target", ["function", "trigger"])
    def test_function_and_trigger_unsupported(self, registry, action, extra, target):
        with pytest.raises(UnsupportedCombinationError) as exc_info:
            build(registry, "schema", action, target=target, name="fn", **extra)
        assert exc_info.value.code == "UNSUPPORTED_COMBINATION"
        assert exc_info.value.field == "target"


class TestCatalogReadBuilders:

    def test_list_tables_defaults_to_public(self, registry):
        statement = build(registry, "schema", "list", target="table")
        assert "FROM pg_tables WHERE schemaname = $1" in statement.sql
        assert statement.params == ("public",)

    def test_list_paging_is_bound(self, registry):
        statement = build(registry, "schema", "list", target="index", table="orders", limit=10, offset=20)
        assert statement.sql.endswith("LIMIT $2 OFFSET $3")
        assert statement.params == ("orders", 10, 20)

    def test_list_columns(self, registry):
        statement = build(registry, "schema", "list", target="column", tableName="orders", schema="sales")
        assert "table_schema = $1 AND table_name = $2" in statement.sql
        assert statement.params == ("sales", "orders")

    def test_list_without_filters_has_no_params(self, registry):
        assert build(registry, "schema", "list", target="database").params == ()

    def test_describe(self, registry):
        statement = build(registry, "schema", "describe", target="table", table="orders")
        assert "information_schema.columns" in statement.sql
        assert statement.params == ("public", "orders")


class TestQueryBuilders:

    def test_read_passes_sql_through(self, registry):
        statement = build(registry, "query", "read", sql="SELECT * FROM t WHERE id = $1", params=[5], timeout_ms=500)
        assert statement.sql == "SELECT * FROM t WHERE id = $1"
        assert statement.params == (5,)
        assert statement.timeout_ms == 500

    def test_write_query_alias(self, registry):
        statement = build(registry, "query", "write", query="DELETE FROM t WHERE id = $1", params=[1])
        assert statement.sql == "DELETE FROM t WHERE id = $1"

    def test_explain_plain(self, registry):
        assert build(registry, "query", "explain", sql="SELECT 1").sql == "EXPLAIN SELECT 1"

    def test_explain_options(self, registry):
        statement = build(registry, "query", "explain", sql="SELECT 1",
                          options={"explain_analyze": True, "explain_format": "json"})
        assert statement.sql == "EXPLAIN (ANALYZE, FORMAT JSON) SELECT 1"

    def test_explain_format_only(self, registry):
        statement = build(registry, "query", "explain", sql="SELECT 1", format="yaml")
        assert statement.sql == "EXPLAIN (FORMAT YAML) SELECT 1"

    def test_count(self, registry):
        statement = build(registry, "query", "count", table="orders", where="total > $1", params=[100])
        assert statement.sql == 'SELECT COUNT(*) AS count FROM "public"."orders" WHERE total > $1'
        assert statement.params == (100,)

    def test_count_column_and_condition_alias(self, registry):
        statement = build(registry, "query", "count", tableName="orders", schema="sales", column="note",
                          condition="total > 0")
        assert statement.sql == 'SELECT COUNT("note") AS count FROM "sales"."orders" WHERE total > 0'

    def test_exists(self, registry):
        statement = build(registry, "query", "exists", table="orders", filter="id = $1", params=[3])
        assert statement.sql == 'SELECT EXISTS(SELECT 1 FROM "public"."orders" WHERE id = $1) AS exists'


class TestTransactionBuilders:

    def test_begin(self, registry):
        assert build(registry, "tx", "begin").sql == "BEGIN"

    def test_begin_isolation_level(self, registry):
        statement = build(registry, "tx", "begin", options={"isolationLevel": "repeatable_read"})
        assert statement.sql == "BEGIN ISOLATION LEVEL REPEATABLE READ"

    def test_commit_rollback(self, registry):
        assert build(registry, "tx", "commit").sql == "COMMIT"
        assert build(registry, "tx", "rollback").sql == "ROLLBACK"

    def test_savepoints(self, registry):
        assert build(registry, "tx", "savepoint", name="sp1").sql == 'SAVEPOINT "sp1"'
        assert build(registry, "tx", "release", name="sp1").sql == 'RELEASE SAVEPOINT "sp1"'
        assert build(registry, "tx", "rollback_to", name="sp1").sql == 'ROLLBACK TO SAVEPOINT "sp1"'


class TestObservabilityBuilders:

    def test_health(self, registry):
        assert build(registry, "monitor", "health").sql == "SELECT version(), current_database(), now()"

    def test_connections_excludes_idle_by_default(self, registry):
        assert "state != 'idle'" in build(registry, "monitor", "connections").sql
        assert "state != 'idle'" not in build(registry, "monitor", "connections", include_idle=True).sql

    def test_locks(self, registry):
        statement = build(registry, "monitor", "locks")
        assert "FROM pg_locks" in statement.sql
        assert statement.params == ()

    def test_size_database_is_parameterized(self, registry):
        statement = build(registry, "monitor", "size", database="shop")
        assert statement.sql == "SELECT pg_size_pretty(pg_database_size($1)) AS size"
        assert statement.params == ("shop",)

    def test_size_table(self, registry):
        statement = build(registry, "monitor", "size", table="orders", schema="sales")
        assert "pg_total_relation_size($1::regclass)" in statement.sql
        assert statement.params == ('"sales"."orders"',)

    def test_size_table_keeps_case(self, registry):
        created = build(registry, "schema", "create", target="table", name="Orders", definition="id int")
        assert created.sql == 'CREATE TABLE "Orders" (id int)'

        statement = build(registry, "monitor", "size", table="Orders")
        assert statement.params == ('"Orders"',)

        statement = build(registry, "monitor", "size", tableName="line$items", schema="Sales")
        assert statement.params == ('"Sales"."line$items"',)

    def test_size_listing(self, registry):
        statement = build(registry, "monitor", "size")
        assert "LIMIT 20" in statement.sql
        assert statement.params == ()


class TestDeterminism:

    @pytest.mark.parametrize("kind, action, fields", [
        ("admin", "vacuum", {"target": "orders", "options": {"full": True, "verbose": True}}),
        ("schema", "drop", {"target": "view", "name": "v", "cascade": True}),
        ("query", "count", {"table": "orders", "where": "id > $1", "params": [1]}),
        ("tx", "begin", {"isolation_level": "serializable"}),
    ])
    def test_same_input_same_sql(self, registry, kind, action, fields):
        first = registry.dispatch(kind, action, fields)
        second = registry.dispatch(kind, action, dict(fields))
        assert first == second
