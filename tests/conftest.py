import os

# Configure the app for an in-memory database before anything imports it
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_FILE"] = ""
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-key")

from itertools import count

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db import Base, get_db
from app.models import User
from app.services import account_service as account_module
from app.services.firebase import firebase_auth
from app.services.firebase.firebase_auth import TokenData
from app.services.google_maps import Coordinates, PlaceCandidate
from app.services.search import SearchCacheService, SearchService, get_search_service
from app.services.quota_service import QuotaService
from main import app

SPRINGFIELD = Coordinates(lat=39.78, lng=-89.65)


class FakeGeocodingClient:
    def __init__(self, coordinates=SPRINGFIELD, error=None):
        self.coordinates = coordinates
        self.error = error
        self.calls = []

    async def geocode(self, address):
        self.calls.append(address)
        if self.error:
            raise self.error
        return self.coordinates


class FakePlacesClient:
    def __init__(self, candidates=None, error=None):
        self.candidates = candidates if candidates is not None else []
        self.error = error
        self.calls = []

    async def nearby_search(self, center, radius_meters, business_type):
        self.calls.append((center, radius_meters, business_type))
        if self.error:
            raise self.error
        return list(self.candidates)


def springfield_candidates():
    return [
        PlaceCandidate(
            name="Far Cafe",
            location=Coordinates(lat=39.80, lng=-89.65),
            place_id="far",
            address="2 Far St",
            rating=4.1,
            total_reviews=12,
        ),
        PlaceCandidate(
            name="Near Cafe",
            location=Coordinates(lat=39.781, lng=-89.65),
            place_id="near",
            address="1 Near St",
            rating=4.7,
            total_reviews=80,
        ),
    ]


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def file_session_factory(tmp_path):
    """Sessions on separate connections to one database file, for interleaved writers."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session_factory):
    sequence = count(1)

    async def _make_user(**overrides) -> User:
        n = next(sequence)
        values = {
            "firebase_uid": f"uid-{n}",
            "email": f"user{n}@example.com",
            "name": f"User {n}",
            "remaining_searches": 3,
        }
        values.update(overrides)
        async with session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
def geocoder():
    return FakeGeocodingClient()


@pytest.fixture
def places():
    return FakePlacesClient(springfield_candidates())


@pytest.fixture
def search_service(geocoder, places):
    return SearchService(
        geocoding_client=geocoder,
        places_client=places,
        cache=SearchCacheService(),
        quota=QuotaService(),
    )


@pytest.fixture
def tokens(monkeypatch):
    """Maps bearer tokens to identities in place of Firebase verification."""
    registry: dict[str, TokenData] = {}

    async def fake_verify(id_token):
        from app.utils.errors import UnauthenticatedError

        if id_token not in registry:
            raise UnauthenticatedError("Invalid token")
        return registry[id_token]

    monkeypatch.setattr(firebase_auth, "verify_token_async", fake_verify)
    return registry


@pytest.fixture(autouse=True)
def no_firebase_admin(monkeypatch):
    deleted = []
    monkeypatch.setattr(account_module, "get_firebase_app", lambda: None)
    monkeypatch.setattr(account_module.auth, "delete_user", deleted.append)
    return deleted


@pytest.fixture
async def client(session_factory, search_service):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_service] = lambda: search_service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}

