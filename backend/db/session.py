"""Database session management"""
import os
from functools import lru_cache
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

from errors import ConfigurationError

# Load environment variables for LOCAL development only
# In Lambda, env vars are set via CloudFormation - don't override them with .env files
# AWS_LAMBDA_FUNCTION_NAME is set by Lambda runtime
_is_lambda = os.getenv("AWS_LAMBDA_FUNCTION_NAME") is not None

if not _is_lambda:
    # Local development: load .env.local (takes precedence over .env)
    _backend_dir = Path(__file__).parent.parent
    env_local = _backend_dir / '.env.local'
    env_file = _backend_dir / '.env'

    if env_local.exists():
        load_dotenv(env_local, override=True)
    elif env_file.exists():
        load_dotenv(env_file, override=True)


def build_engine(database_url: str, **engine_options) -> Engine:
    """
    Create a pooled engine.

    The pool is process-wide and safe for concurrent use; SQLite gets
    foreign keys switched on so ON DELETE CASCADE behaves like PostgreSQL.
    """
    engine = create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=3600,   # Recycle connections after 1 hour
        **engine_options,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """
    Shared engine, created on first use.

    Created lazily so that endpoints which never touch the relational
    provider keep working when DATABASE_URL is not set.

    Raises:
        ConfigurationError: If DATABASE_URL is not set
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ConfigurationError("DATABASE_URL is not configured for the relational provider")
    return build_engine(database_url)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Session factory bound to the shared engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

