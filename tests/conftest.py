"""
Shared fixtures: in-memory database, ASGI client and user factories.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from newsletter_api.core.database import Base, get_db
from newsletter_api.core.security import create_access_token, get_password_hash
from newsletter_api.main import create_app
from newsletter_api.models import Newsletter, User

DEFAULT_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
def app(session_factory):
    application = create_app()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def make_user(session_factory):
    """Insert a user straight into the database."""
    counter = {"n": 0}

    async def _make_user(
        name: str = None,
        *,
        is_super: bool = False,
        pending_confirm: bool = False,
        pending_password: bool = False,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        async with session_factory() as session:
            user = User(
                name=name,
                email=f"{name.lower().replace(' ', '.')}.{counter['n']}@example.com",
                hashed_password=get_password_hash(password),
                is_super=is_super,
                pending_confirm=pending_confirm,
                pending_password=pending_password,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
def make_newsletter(session_factory):
    async def _make_newsletter(owner: User, name: str = "Daily digest", active: bool = True) -> Newsletter:
        async with session_factory() as session:
            newsletter = Newsletter(name=name, user_id=owner.id, active=active)
            session.add(newsletter)
            await session.commit()
            await session.refresh(newsletter)
            return newsletter

    return _make_newsletter


@pytest.fixture
def fetch(session_factory):
    """Read a row back, soft-deleted ones included."""
    async def _fetch(model, record_id):
        async with session_factory() as session:
            return await session.get(model, record_id)

    return _fetch


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}

    return _auth_headers
