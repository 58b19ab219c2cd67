"""Pytest configuration and shared fixtures."""

import os

# Must be set before catalog_admin.config is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("CACHE_ENABLED", "false")

from fnmatch import fnmatch
from typing import Dict, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog_admin.dependencies import get_cache, get_db
from catalog_admin.main import app
from catalog_admin.models import Base, Category, Product


class FakeCache:
    """In-memory stand-in for CacheService."""

    enabled = True

    def __init__(self):
        self.store: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl: int = 60) -> bool:
        self.store[key] = value
        return True

    async def delete_pattern(self, pattern: str) -> int:
        keys = [k for k in self.store if fnmatch(k, pattern)]
        for key in keys:
            del self.store[key]
        return len(keys)

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest_asyncio.fixture
async def session_factory():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest_asyncio.fixture
async def api(session_factory, fake_cache):
    """httpx client talking to the app in-process, on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: fake_cache

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api/v1") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def sample_categories(test_db: AsyncSession) -> Dict[str, Category]:
    """beauty (1), laptops (2), groceries (3)."""
    categories = {
        name: Category(id=i, name=name)
        for i, name in enumerate(["beauty", "laptops", "groceries"], start=1)
    }
    test_db.add_all(categories.values())
    await test_db.commit()
    return categories


@pytest_asyncio.fixture
async def sample_products(test_db: AsyncSession, sample_categories) -> Dict[int, Product]:
    """Six products: 1 beauty, 3 laptops, 0 groceries, 2 uncategorized."""
    rows = [
        (1, "Essence Mascara", "Essence", 1),
        (2, "MacBook Pro 14", "Apple", 2),
        (3, "ThinkPad X1", "Lenovo", 2),
        (4, "Zenbook Duo", "Asus", 2),
        (5, "Desk Lamp", "Ikea", None),
        (6, "Apple Watch Band", "Generic", None),
    ]
    products = {
        pid: Product(id=pid, title=title, brand=brand, category_id=cid, price=10.0 * pid, stock=pid)
        for pid, title, brand, cid in rows
    }
    test_db.add_all(products.values())
    await test_db.commit()
    return products
