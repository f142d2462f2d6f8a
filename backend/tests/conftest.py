"""Shared fixtures: an in-memory SQLite database, an API client and seeded stores."""
import os

# Must be set before metrics_engine.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEBUG", "false")

from collections.abc import AsyncGenerator
from datetime import date, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from metrics_engine.database import Base, get_db
from metrics_engine.main import app
from metrics_engine.models import DailyMetricsRow, WorkoutRow
from metrics_engine.schemas.metrics import DailyMetrics, WorkoutRecord
from metrics_engine.services.store import InMemoryMetricsStore

TODAY = date(2024, 3, 15)


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_day(day: date, **values) -> DailyMetrics:
    return DailyMetrics(date=day, **values)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def week_of_records() -> list[DailyMetrics]:
    """Seven consecutive days ending on TODAY with a gap two days ago."""
    rows = []
    for offset, rhr in enumerate([62, 61, 63, 64, 0, 65, 66]):
        day = TODAY - timedelta(days=6 - offset)
        rows.append(
            make_day(
                day,
                step_count=8000 + offset * 500,
                active_calories=400 + offset * 20,
                sleep_hours=7.0 + offset * 0.1,
                sleep_quality=7,
                resting_heart_rate=rhr,
                hrv=45 + offset,
                vo2_max=42.0,
            )
        )
    return rows


@pytest.fixture
def store(week_of_records) -> InMemoryMetricsStore:
    return InMemoryMetricsStore(
        week_of_records,
        workouts=[
            WorkoutRecord(
                workout_type="run",
                start_time=datetime.combine(TODAY, datetime.min.time()) + timedelta(hours=7),
                duration_minutes=45,
                distance_km=8.2,
                calories=520,
                avg_heart_rate=148,
                max_heart_rate=171,
                perceived_exertion=6,
            ),
        ],
    )


@pytest_asyncio.fixture
async def seeded_db(db_session: AsyncSession, week_of_records) -> AsyncSession:
    for record in week_of_records:
        db_session.add(DailyMetricsRow(**record.model_dump()))
    db_session.add(
        WorkoutRow(
            workout_type="cycle",
            start_time=datetime.combine(TODAY, datetime.min.time()) + timedelta(hours=18),
            duration_minutes=60,
            avg_heart_rate=135,
            calories=600,
            distance_km=25.0,
            source="manual",
        )
    )
    await db_session.commit()
    return db_session
