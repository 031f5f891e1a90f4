"""
BileMo API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (database, seeded accounts,
       tokens, API client, mocked sessions).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── engine: in-memory SQLite (StaticPool: one shared connection) with the schema
    ├── session_factory: sessions bound to that engine
    ├── seed: admin, two customers (acme, globex), one user each, two products
    ├── cache_store: the TagAwareCache behind the app's list cache
    ├── app / client: fresh FastAPI app + HTTPX AsyncClient
    ├── admin_headers / acme_headers / globex_headers: bearer tokens
    ├── account_password / make_bearer: credentials for login tests
    └── mock_db_session: AsyncMock session for service unit tests
"""

import os

# Override settings for testing BEFORE any app imports
# Why: Prevents tests from touching a real database or using the dev secret
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncGenerator, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.cache import TagAwareCache
from app.database import Base, get_db_session
from app.main import create_app
from app.models import Admin, Customer, Product, User
from app.security.passwords import hash_password
from app.security.tokens import create_access_token

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "s3cret-passw0rd"

# Hashed once for the whole run: bcrypt takes ~0.2s per hash
PASSWORD_HASH = hash_password(PASSWORD)


@dataclass
class SeedData:
    admin_id: int
    acme_id: int
    globex_id: int
    alice_id: int
    bob_id: int
    product_ids: list


def bearer(email: str, kind: str, roles) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(email, kind, roles)}"}


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    """
    In-memory SQLite engine with the full schema.

    StaticPool keeps a single connection, so every session in the test sees
    the same in-memory database.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seed(session_factory) -> SeedData:
    """
    Seeds one admin, two customers each owning one user, and two products.

        admin@bilemo.com   (Admin)
        acme@example.com   (Customer) ── alice@example.com
        globex@example.com (Customer) ── bob@example.com
    """
    async with session_factory() as session:
        admin = Admin(
            email="admin@bilemo.com",
            firstname="Marlene",
            lastname="Admin",
            password=PASSWORD_HASH,
        )
        acme = Customer(name="Acme", email="acme@example.com", password=PASSWORD_HASH)
        globex = Customer(name="Globex", email="globex@example.com", password=PASSWORD_HASH)
        alice = User(email="alice@example.com", firstname="Alice", lastname="Martin", customers=[acme])
        bob = User(email="bob@example.com", firstname="Bob", lastname="Durand", customers=[globex])
        products = [
            Product(name="Phone X", description="Flagship", price=Decimal("999.99")),
            Product(name="Phone Lite", description="Entry level", price=Decimal("199.00")),
        ]
        session.add_all([admin, acme, globex, alice, bob, *products])
        await session.commit()

        return SeedData(
            admin_id=admin.id,
            acme_id=acme.id,
            globex_id=globex.id,
            alice_id=alice.id,
            bob_id=bob.id,
            product_ids=[p.id for p in products],
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def cache_store() -> TagAwareCache:
    return TagAwareCache()


@pytest.fixture
def app(session_factory, cache_store):
    """
    A fresh application per test, wired to the test database.

    Building a new app (rather than importing `app.main.app`) gives every
    test an empty list cache.
    """
    application = create_app(cache_store=cache_store)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def client(app, seed):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def account_password() -> str:
    """Plain-text password of every seeded account."""
    return PASSWORD


@pytest.fixture
def make_bearer():
    return bearer


@pytest.fixture
def admin_headers(seed):
    return bearer("admin@bilemo.com", "admin", ["ROLE_ADMIN", "ROLE_USER"])


@pytest.fixture
def acme_headers(seed):
    return bearer("acme@example.com", "customer", ["ROLE_USER"])


@pytest.fixture
def globex_headers(seed):
    return bearer("globex@example.com", "customer", ["ROLE_USER"])


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Service unit tests should not require a real database.
    How:     Mocks get, execute, flush, commit, rollback, delete and close.

    Usage:
        async def test_get_product(mock_db_session):
            mock_db_session.get.return_value = product
            result = await product_service.get_product(mock_db_session, 1)
    """
    session = AsyncMock()
    session.get = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session
