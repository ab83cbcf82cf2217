import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_premium.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["STANDARD_SUBSCRIPTION_DAYS"] = "31"
os.environ["GOLD_SUBSCRIPTION_DAYS"] = "31"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from premium_service.domain.premium import SECS_IN_A_DAY, Tier
from premium_service.main import app
from premium_service.repositories.guild import create_guild

# Fixed clock for service-level tests
NOW = 1_760_000_000
SUBSCRIPTION_DAYS = 31


@pytest.fixture(scope="function")
def session_factory():
    """Create a fresh database for each test, run migrations and yield its sessionmaker."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    try:
        yield TestingSessionLocal
    finally:
        test_engine.dispose()

        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Session used by the test and, through the client, by the app."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from premium_service.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


def days_ago(days: float, now: int = NOW) -> int:
    return int(now - days * SECS_IN_A_DAY)


@pytest.fixture(scope="function")
def make_guild(db: Session):
    """Factory for guild rows. ``started_days_ago`` sets tx_time_unix relative to ``now``."""

    def _make_guild(
        guild_id: int,
        tier: Tier = Tier.FREE,
        started_days_ago: float | None = None,
        now: int = NOW,
        transferred_to: int | None = None,
        inherits_from: int | None = None,
    ):
        tx_time_unix = None
        if started_days_ago is not None:
            tx_time_unix = days_ago(started_days_ago, now)
        guild = create_guild(
            db,
            guild_id=guild_id,
            guild_name=f"guild-{guild_id}",
            premium=int(tier),
            tx_time_unix=tx_time_unix,
        )
        if transferred_to is not None or inherits_from is not None:
            guild.transferred_to = transferred_to
            guild.inherits_from = inherits_from
            db.commit()
            db.refresh(guild)
        return guild

    return _make_guild
