"""Test fixtures for the store service and the client."""
import os
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

from diarias.core.models import Employee, Level, WorkDay, WorkDayType  # noqa: E402
from diarias_api.database import init_models  # noqa: E402
from diarias_api.dependencies import get_db_session  # noqa: E402
from diarias_api.main import app  # noqa: E402


@pytest_asyncio.fixture
async def db_engine():
    """A private in-memory database per test."""

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def asgi_app(db_engine):
    """The FastAPI app wired to the per-test database."""

    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def _session_override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _session_override
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(asgi_app) -> AsyncClient:
    """Provide an HTTP client for integration tests."""

    async with AsyncClient(transport=ASGITransport(app=asgi_app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def make_user(client: AsyncClient):
    """Factory: register + log in a user, returning ``{"id": ..., "headers": {...}}``."""

    async def _make_user(username: str = "owner", password: str = "secret123") -> dict:
        response = await client.post("/auth/register", json={"username": username, "password": password})
        assert response.status_code == 201
        user_id = response.json()["id"]
        login = await client.post("/auth/login", json={"username": username, "password": password})
        assert login.status_code == 200
        return {"id": user_id, "headers": {"Authorization": f"Bearer {login.json()['access_token']}"}}

    return _make_user


@pytest.fixture
def rate_card_employee() -> Employee:
    """dailyRate=100, partyRate=150, extraHourRate=20 with days in Feb and Mar 2024."""

    return Employee(
        id="emp-1",
        name="Ana Souza",
        artistic_name="Palhaça Pipoca",
        level=Level.RECREADOR,
        daily_rate=Decimal("100"),
        party_rate=Decimal("150"),
        extra_hour_rate=Decimal("20"),
        work_days=[
            WorkDay(id="2024-02-10", date=date(2024, 2, 10), type=WorkDayType.FESTA, value=Decimal("150")),
            WorkDay(
                id="2024-02-11",
                date=date(2024, 2, 11),
                type=WorkDayType.COMUM,
                extra_hours=1,
                value=Decimal("110"),
            ),
            WorkDay(id="2024-03-01", date=date(2024, 3, 1), type=WorkDayType.COMUM, value=Decimal("90")),
            WorkDay(id="2024-04-02", date=date(2024, 4, 2), type=WorkDayType.COMUM, value=Decimal("100")),
        ],
    )
