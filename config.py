"""
Configuration for the PostgreSQL action server
Environment-aware configuration based on APP_ENV
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv

# Environment modes
EnvironmentMode = Literal["development", "test", "production"]


def load_app_environment(mode: Optional[str] = None) -> str:
    """
    Load environment variables from the appropriate .env file.

    Priority:
    1. Explicit 'mode' argument
    2. APP_ENV environment variable
    3. Default to 'development'

    Loads .env.{mode} if it exists. Values already set in the host
    environment win over the file.
    """
    if not mode:
        mode = os.getenv('APP_ENV', 'development')

    env_file = Path(__file__).parent / f'.env.{mode}'
    if env_file.exists():
        load_dotenv(env_file, override=False)

    return mode


def _env(name: str, fallback: str, default: str) -> str:
    """DB_* variable, then the libpq PG* name, then the default."""
    return os.getenv(name) or os.getenv(fallback) or default


@dataclass
class DatabaseConfig:
    """PostgreSQL connection and pool configuration"""

    host: str
    port: int
    database: str
    user: str
    password: str

    # Connection pool settings
    min_pool_size: int = 2
    max_pool_size: int = 10
    command_timeout: int = 60  # seconds

    ssl_mode: str = "prefer"

    @property
    def ssl_setting(self):
        """
        asyncpg `ssl` argument for ssl_mode.

        asyncpg expects: True (require SSL), False (disable SSL), or
        'prefer' (try SSL, fall back to plain).
        """
        if self.ssl_mode == 'require':
            return True
        if self.ssl_mode == 'disable':
            return False
        return 'prefer'

    @classmethod
    def from_environment(cls, mode: Optional[EnvironmentMode] = None) -> 'DatabaseConfig':
        """
        Load configuration from environment variables

        Environment variables (libpq fallback in brackets):
        - APP_ENV: Environment mode (development, test, production)
        - DB_HOST [PGHOST]: Database host (default: localhost)
        - DB_PORT [PGPORT]: Database port (default: 5432)
        - DB_NAME [PGDATABASE]: Database name (default: postgres)
        - DB_USER [PGUSER]: Database user (default: postgres)
        - DB_PASSWORD [PGPASSWORD]: Database password
        - DB_SSL_MODE: SSL mode (default: prefer in development, require otherwise)
        - DB_MIN_POOL_SIZE / DB_MAX_POOL_SIZE: Pool bounds (default: 2 / 10)
        - DB_COMMAND_TIMEOUT: Default statement timeout in seconds (default: 60)
        """
        mode = load_app_environment(mode)

        config = cls(
            host=_env('DB_HOST', 'PGHOST', 'localhost'),
            port=int(_env('DB_PORT', 'PGPORT', '5432')),
            database=_env('DB_NAME', 'PGDATABASE', 'postgres'),
            user=_env('DB_USER', 'PGUSER', 'postgres'),
            password=_env('DB_PASSWORD', 'PGPASSWORD', ''),
            ssl_mode=os.getenv('DB_SSL_MODE', 'prefer' if mode == 'development' else 'require'),
            min_pool_size=int(os.getenv('DB_MIN_POOL_SIZE', '2')),
            max_pool_size=int(os.getenv('DB_MAX_POOL_SIZE', '10')),
            command_timeout=int(os.getenv('DB_COMMAND_TIMEOUT', '60')),
        )

        config.validate_safety(mode)
        return config

    def validate_safety(self, mode: str):
        """Ensure configuration is safe for the requested mode"""
        if mode == 'test':
            if 'test' not in self.database:
                raise ValueError(f"SAFETY ERROR: Test mode requested but database is '{self.database}'. Test database must contain 'test'.")
            if 'prod' in self.database:
                raise ValueError(f"SAFETY ERROR: Test mode requested but database '{self.database}' appears to be production.")
        if self.min_pool_size > self.max_pool_size:
            raise ValueError(f"DB_MIN_POOL_SIZE ({self.min_pool_size}) exceeds DB_MAX_POOL_SIZE ({self.max_pool_size})")


@dataclass
class ServerConfig:
    """
    Process-level settings for the tool server.

    Environment Variables:
    - STATEMENT_LOG_DIR: Write a daily JSONL statement log here (default: disabled)
    - LOG_LEVEL: Root log level (default: INFO)
    - HTTP_HOST / HTTP_PORT: Bind address for --http (default: 127.0.0.1:8000)
    """
    statement_log_dir: Optional[str] = None
    log_level: str = "INFO"
    http_host: str = "127.0.0.1"
    http_port: int = 8000

    @classmethod
    def from_environment(cls) -> "ServerConfig":
        return cls(
            statement_log_dir=os.getenv("STATEMENT_LOG_DIR") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            http_host=os.getenv("HTTP_HOST", "127.0.0.1"),
            http_port=int(os.getenv("HTTP_PORT", "8000")),
        )


# Utility functions
def get_environment_mode() -> EnvironmentMode:
    """Get current environment mode from APP_ENV variable"""
    mode = os.getenv('APP_ENV', 'development').lower()
    if mode not in ('development', 'test', 'production'):
        mode = 'development'
    return mode  # type: ignore

