from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from workforce.config import settings
from workforce.core.enums import Role
from workforce.database import Base, get_db
from workforce.main import app
from workforce.models import CompanySettings, Shift, User
from workforce.services import gamification


@pytest.fixture
async def engine(tmp_path):
    # File-backed so that concurrent sessions use separate connections
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'workforce.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def users(db):
    people = {
        "staff": User(name="Ayse", role=Role.STAFF.value),
        "other": User(name="Mehmet", role=Role.STAFF.value),
        "admin": User(name="Zeynep", role=Role.ADMIN.value),
        "executive": User(name="Can", role=Role.EXECUTIVE.value),
    }
    db.add_all(people.values())
    await db.commit()
    return people


@pytest.fixture
async def client(session_factory, monkeypatch):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(gamification, "AsyncSessionLocal", session_factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def create_access_token(data):
    """Bearer token as the directory service would issue it for a signed-in user."""
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


async def add_shift(db, user, start, hours=8):
    shift = Shift(user_id=user.id, start_time=start, end_time=start + timedelta(hours=hours))
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    return shift


async def add_office(db, lat=0.0, lng=0.0, radius=50.0):
    office = CompanySettings(office_lat=lat, office_lng=lng, geofence_radius=radius)
    db.add(office)
    await db.commit()
    return office


def tomorrow_at(hour):
    day = datetime.now().date() + timedelta(days=1)
    return datetime.combine(day, datetime.min.time()).replace(hour=hour)
