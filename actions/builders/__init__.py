"""Statement builders, one module per action family."""

from .ddl import build_alter, build_create, build_drop
from .introspection import build_describe, build_list
from .maintenance import (
    build_analyze,
    build_cancel_backend,
    build_reindex,
    build_reload_conf,
    build_reset_stats,
    build_set_config,
    build_stats,
    build_terminate_backend,
    build_vacuum,
)
from .observability import build_connections, build_health, build_locks, build_size
from .query import build_count, build_exists, build_explain, build_read, build_write
from .transaction import (
    build_begin,
    build_commit,
    build_release,
    build_rollback,
    build_rollback_to,
    build_savepoint,
)

__all__ = [
    'build_alter', 'build_create', 'build_drop',
    'build_describe', 'build_list',
    'build_analyze', 'build_cancel_backend', 'build_reindex', 'build_reload_conf',
    'build_reset_stats', 'build_set_config', 'build_stats', 'build_terminate_backend',
    'build_vacuum',
    'build_connections', 'build_health', 'build_locks', 'build_size',
    'build_count', 'build_exists', 'build_explain', 'build_read', 'build_write',
    'build_begin', 'build_commit', 'build_release', 'build_rollback',
    'build_rollback_to', 'build_savepoint',
]
