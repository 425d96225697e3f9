import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["SALON_TIMEZONE"] = "Asia/Singapore"

from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from salon.database import Base, get_db
from salon.main import app
from salon.models import SalonSettings, Service, Stylist
from salon.models.salon_settings import DEFAULT_WEEKLY_SCHEDULE

# Monday; the default weekly schedule opens 11:00-19:00 and closes on Tuesdays
MONDAY = date(2030, 6, 3)
TUESDAY = date(2030, 6, 4)

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db):
    """Default salon settings, one stylist and a few services."""
    db.add(SalonSettings(
        weekly_schedule=dict(DEFAULT_WEEKLY_SCHEDULE),
        closed_dates=[],
        special_closures=[],
        blocked_slots={},
        schedule_mode="salon_wide",
    ))
    stylist = Stylist(name="Mei", blocked_dates=[])
    haircut = Service(name="Haircut", duration=60, price=45)
    colour = Service(
        name="Colour",
        duration=90,
        processing_wait_time=30,
        processing_duration=30,
        price=120,
    )
    db.add_all([stylist, haircut, colour])
    await db.commit()
    return {"stylist": stylist, "haircut": haircut, "colour": colour}


@pytest_asyncio.fixture
async def client(session_factory, seeded):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload():
    def make(**overrides):
        payload = {
            "date": MONDAY.isoformat(),
            "time": "11:00",
            "duration": 60,
            "customer_name": "Alice Tan",
            "customer_email": "alice@example.com",
        }
        payload.update(overrides)
        return payload
    return make
