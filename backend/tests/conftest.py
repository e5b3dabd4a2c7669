"""Shared pytest fixtures for FacilityDesk tests.

Provides:
- A file-backed SQLite engine per test, with and without case_comments
- SQL and in-memory fixture data sources, seeded with the demo dataset
- A started DashboardContext and an httpx AsyncClient over the app
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

# Force test settings before the app modules read them
TEST_SECRET = "test-secret-key-for-tests"
os.environ["FD_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["FD_JWT_SECRET"] = TEST_SECRET
os.environ["FD_TIMEZONE"] = "UTC"
os.environ["FD_USE_FIXTURES"] = "false"
os.environ["FD_DEV_BYPASS_AUTH"] = "false"

from facilitydesk.api.deps import get_context  # noqa: E402
from facilitydesk.config import AppConfig  # noqa: E402
from facilitydesk.context import build_context  # noqa: E402
from facilitydesk.core.realtime import ChangeHub  # noqa: E402
from facilitydesk.db.engine import build_engine, build_session_factory, init_db  # noqa: E402
from facilitydesk.db.models import OPTIONAL_TABLES  # noqa: E402
from facilitydesk.db.repositories import (  # noqa: E402
    build_fixture_data_source,
    build_sql_data_source,
)
from facilitydesk.fixtures import build_fixture_dataset  # noqa: E402
from facilitydesk.main import app  # noqa: E402

SEED_ORDER = ("properties", "units", "users", "cases", "tasks", "maintenance_plans")


def make_token(user_id: str = "dev-user", email: str = "demo@newsec.se", secret: str = TEST_SECRET) -> str:
    return jwt.encode({"sub": user_id, "email": email}, secret, algorithm="HS256")


async def seed(data_source, dataset=None) -> None:
    """Insert the demo dataset through the repositories."""
    dataset = dataset or build_fixture_dataset()
    repos = data_source.repositories()
    for table in SEED_ORDER:
        for record in dataset[table]:
            await repos[table].create(record.model_dump())


# ── Configuration ─────────────────────────────────────────────────────

@pytest.fixture
def test_config() -> AppConfig:
    return AppConfig(
        USE_FIXTURES=False,
        DEV_BYPASS_AUTH=False,
        JWT_SECRET=TEST_SECRET,
        TIMEZONE="UTC",
    )


# ── Database fixtures ─────────────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Engine on a fresh database with every table."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def bare_engine(tmp_path):
    """Engine on a database without the optional tables."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'bare.db'}")
    await init_db(bind=engine, skip=OPTIONAL_TABLES)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest_asyncio.fixture
async def hub() -> AsyncGenerator[ChangeHub, None]:
    hub = ChangeHub()
    yield hub
    await hub.close()


@pytest_asyncio.fixture
async def sql_source(session_factory, hub):
    """SQL data source seeded with the demo dataset."""
    source = build_sql_data_source(session_factory, hub)
    await seed(source)
    await hub.drain()
    return source


@pytest.fixture
def fixture_source(hub):
    return build_fixture_data_source(hub)


# ── App fixtures ──────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def context(test_config, session_factory, hub, sql_source):
    ctx = build_context(test_config, hub=hub, session_factory=session_factory)
    await ctx.start()
    yield ctx
    await ctx.stop()


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest_asyncio.fixture
async def client(context) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with the dashboard context injected."""
    app.dependency_overrides[get_context] = lambda: context

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
