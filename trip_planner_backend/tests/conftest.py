"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from trip_planner_backend.app.main import app
from trip_planner_backend.app.core.jwt import create_access_token
from trip_planner_backend.app.db.session import get_db, Base
from trip_planner_backend.app.models.place import Place, Category, PlaceCategory
from trip_planner_backend.app.services.day_codec import encode_images

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

OWNER_ID = 1
OTHER_OWNER_ID = 2


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def override_db(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client(override_db):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def auth_headers(user_id: int) -> dict:
    token = create_access_token(data={"sub": f"user{user_id}", "user_id": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers():
    return auth_headers(OWNER_ID)


@pytest.fixture
def other_owner_headers():
    return auth_headers(OTHER_OWNER_ID)


@pytest.fixture
def make_place(db_session):
    """Insert a place and return it."""
    async def _make_place(
        place_id: int = None,
        name: str = "Ben Thanh Market",
        address: str = "Le Loi, District 1",
        latitude: float = 10.0,
        longitude: float = 20.0,
        price: float = 10.0,
        images=("https://img.example/1.jpg",),
        category_ids=(),
    ) -> Place:
        place = Place(
            id=place_id,
            name=name,
            address=address,
            description=f"{name} description",
            latitude=latitude,
            longitude=longitude,
            price=price,
            images=encode_images(images),
        )
        db_session.add(place)
        await db_session.flush()
        for category_id in category_ids:
            db_session.add(PlaceCategory(place_id=place.id, category_id=category_id))
        await db_session.commit()
        return place

    return _make_place


@pytest.fixture
def make_category(db_session):
    async def _make_category(name: str, category_id: int = None) -> Category:
        category = Category(id=category_id, name=name, description=f"{name} places", icon=f"{name}.svg")
        db_session.add(category)
        await db_session.commit()
        return category

    return _make_category


def build_trip_payload(days, **overrides) -> dict:
    """Request body for trip create/update; ``days`` is a list of place-ID lists."""
    payload = {
        "name": "Weekend",
        "from_date": 1700000000,
        "to_date": 1700086400,
        "users": 2,
        "days": [
            {
                "places": [
                    {"place_id": place_id, "note": "lunch", "visit_time": 60, "start_time": 0, "vehicle": 1}
                    for place_id in day
                ]
            }
            for day in days
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def trip_payload():
    return build_trip_payload
