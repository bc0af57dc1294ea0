import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("ENVIRONMENT", "production")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import services.timetable_management.models  # noqa: F401
import services.user_management.models  # noqa: F401
from main import app
from services.user_management.core.identity import normalize_user
from services.user_management.core.policy import Actor
from services.user_management.core.roles import Department, UserRole, parse_role
from services.user_management.models.users import User
from shared.auth import create_access_token, get_password_hash
from shared.db import Base, get_db


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    async def _make(user_id, role=UserRole.PENDING, approved=None, active=True, password="secret1"):
        if approved is None:
            approved = role != UserRole.PENDING
        user = User(
            user_id=user_id,
            name=f"{user_id} name",
            email=f"{user_id.lower()}@timetable.com",
            hashed_password=get_password_hash(password),
            role=role,
            department=Department.NONE,
            is_approved=approved,
            is_active=active,
            is_deleted=False,
        )
        normalize_user(user)
        async with session_factory() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user

    return _make


@pytest.fixture
def fetch(session_factory):
    async def _fetch(model, id):
        async with session_factory() as session:
            return await session.get(model, id)

    return _fetch


def auth_header(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def make_actor(role, approved=True, active=True, id="actor-1", name="Alice"):
    return Actor(id=id, name=name, role=parse_role(role), is_approved=approved, is_active=active)
