"""
Pytest configuration and fixtures for testing.

Relational tests run against an in-memory SQLite database:
- Schema created from the SQLAlchemy models (create_all)
- Foreign keys switched on, so ON DELETE CASCADE behaves like PostgreSQL
- Fresh database per test (complete isolation)

Set TEST_DATABASE_URL to run the same tests against PostgreSQL instead; the
schema is then built with Alembic migrations and dropped afterwards.

Provider operations are coroutines; tests drive them with asyncio.run().
"""
import os
import pytest
from pathlib import Path
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from alembic.config import Config
from alembic import command
from dotenv import load_dotenv

from db.session import build_engine
from models import Base
from providers.mock import MockProvider
from providers.relational import RelationalProvider
from session.context import ProviderSession
from session.preferences import PreferenceStore
from models.enums import ProviderKind

# Load environment variables (.env.local takes precedence over .env)
env_local = Path('.env.local')
env_file = Path('.env')

if env_local.exists():
    load_dotenv(env_local)
elif env_file.exists():
    load_dotenv(env_file)


@pytest.fixture(scope="function")
def test_engine():
    """
    Database engine with an empty schema.

    - SQLite in memory by default (one shared connection via StaticPool)
    - TEST_DATABASE_URL (PostgreSQL) if set: Alembic migrations up, then down
    """
    test_db_url = os.getenv("TEST_DATABASE_URL")

    if not test_db_url:
        engine = build_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        yield engine
        engine.dispose()
        return

    engine = build_engine(test_db_url)
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    alembic_cfg = Config(str(Path(__file__).parent / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(Path(__file__).parent / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    yield engine

    command.downgrade(alembic_cfg, "base")
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def relational_provider(session_factory):
    """
    Relational provider on an empty database.

    Usage:
        def test_create(relational_provider):
            job = asyncio.run(relational_provider.create_job(JobCreate(...)))
    """
    return RelationalProvider(session_factory=session_factory)


@pytest.fixture(scope="function")
def empty_mock_provider():
    """Mock provider without demo data."""
    return MockProvider(seed=False)


@pytest.fixture(scope="function")
def seeded_mock_provider():
    """Mock provider with the demo data set."""
    return MockProvider()


@pytest.fixture(scope="function")
def preference_store(tmp_path):
    return PreferenceStore(tmp_path / "provider-preference.json")


@pytest.fixture(scope="function")
def provider_session(preference_store):
    """Anonymous session, no deployment gate, mock default."""
    return ProviderSession(store=preference_store, default=ProviderKind.MOCK, deployment=None)
