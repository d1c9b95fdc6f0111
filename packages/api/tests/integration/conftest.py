# This project was developed with assistance from AI tools.
"""Integration test fixtures -- real PostgreSQL, no mocks.

A session-scoped container (started once per test run) provides a real
PostgreSQL instance migrated with alembic. Function-scoped fixtures give each
test an isolated DB session with savepoint rollback so tests don't leak state.
Tests that need several independent sessions (concurrent transitions) commit
for real and clean up with ``truncate_all``.
"""

import os
from datetime import date

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

# ---------------------------------------------------------------------------
# Mark all tests in this directory as integration
# ---------------------------------------------------------------------------
pytestmark = pytest.mark.integration

_DB_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "..", "db")


# ---------------------------------------------------------------------------
# Session-scoped: container + engine + migrations
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pg_container():
    """Start postgres:16 via testcontainers."""
    with PostgresContainer(
        image="postgres:16",
        username="test",
        password="test",
        dbname="test",
    ) as pg:
        yield pg


@pytest.fixture(scope="session")
def db_url(pg_container):
    """Async DB URL for asyncpg."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://test:test@{host}:{port}/test"


@pytest.fixture(scope="session")
def sync_db_url(pg_container):
    """Sync DB URL for Alembic (psycopg2)."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+psycopg2://test:test@{host}:{port}/test"


@pytest.fixture(scope="session", autouse=True)
def _run_migrations(sync_db_url):
    """Run alembic upgrade head against the container."""
    os.environ["DATABASE_URL"] = sync_db_url
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(os.path.join(_DB_DIR, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(_DB_DIR, "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_db_url)
    command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def async_engine(db_url, _run_migrations):
    """Create an async engine pointing at the test container."""
    engine = create_async_engine(db_url, echo=False, poolclass=NullPool)
    yield engine


@pytest.fixture(scope="session")
def session_factory(async_engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=async_engine,
        class_=AsyncSession,
    )


@pytest.fixture(scope="session", autouse=True)
def _patch_db_module(async_engine, session_factory):
    """Point db.database globals at the test database.

    The health endpoint resolves ``db_service`` through ``get_db_service``,
    which reads the module global at call time, so patching the module is
    enough.
    """
    import db.database as db_mod

    db_mod.engine = async_engine
    db_mod.SessionLocal = session_factory
    db_mod.db_service = db_mod.DatabaseService(engine=async_engine)


# ---------------------------------------------------------------------------
# Function-scoped: per-test session with savepoint rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(async_engine):
    """Per-test DB session with savepoint rollback."""
    conn = await async_engine.connect()
    txn = await conn.begin()
    session = AsyncSession(bind=conn, join_transaction_mode="create_savepoint")
    yield session
    await session.close()
    await txn.rollback()
    await conn.close()


@pytest.fixture
def client_factory(db_session):
    """Factory returning an async httpx client with dependency overrides."""
    import db.database as db_mod
    from db.database import get_db, get_db_service

    from src.main import app
    from src.middleware.auth import get_current_user

    async def _make(user):
        async def _get_db():
            yield db_session

        async def _get_current_user(request=None):
            return user

        async def _get_db_service():
            return db_mod.db_service

        app.dependency_overrides[get_db] = _get_db
        app.dependency_overrides[get_current_user] = _get_current_user
        app.dependency_overrides[get_db_service] = _get_db_service
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _make

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seed data helper
# ---------------------------------------------------------------------------


def _build_application(reference: str, customer_number: str, **fields):
    """Unsaved LoanApplication with the minimum required columns."""
    from db import LoanApplication
    from db.enums import ApplicationStatus

    from tests.functional.personas import RM_USER_ID

    values = {
        "application_reference_number": reference,
        "customer_number": customer_number,
        "first_name": "Almaz",
        "last_name": "Tadesse",
        "phone": "+251911223344",
        "major_line_business": "Coffee export",
        "date_of_establishment_mlb": date(2015, 3, 1),
        "loan_type": "Term loan",
        "loan_amount": 250000,
        "loan_period": 36,
        "application_status": ApplicationStatus.PENDING,
        "relation_manager_id": RM_USER_ID,
    }
    values.update(fields)
    return LoanApplication(**values)


@pytest_asyncio.fixture
async def seeded_app(db_session):
    """A PENDING application inside the test's savepoint."""
    app = _build_application("DASHEN-202601-0101", "CUST-0101")
    db_session.add(app)
    await db_session.flush()
    return app


@pytest.fixture
def build_application():
    """Builder for tests that add applications through their own sessions."""
    return _build_application


# ---------------------------------------------------------------------------
# Truncate fixture for tests that commit through their own sessions
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def truncate_all(async_engine):
    """Yield-based: truncates all tables after the test completes."""
    yield
    async with async_engine.begin() as conn:
        await conn.execute(
            text(
                "TRUNCATE TABLE member_decisions, decisions, loan_analyses, documents, "
                "shareholders, loan_applications, audit_events RESTART IDENTITY CASCADE"
            )
        )
