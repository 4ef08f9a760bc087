"""
Product Catalog Backend — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at a throwaway SQLite file + upload dir
    ├── image_store: ImageStore on a temp directory
    ├── db_session: Real AsyncSession on SQLite (tables created)
    ├── mock_repository: AsyncMock standing in for ProductRepository
    ├── sample_image_bytes: Fake image content for upload tests
    ├── test_app: App built by create_app(test_settings)
    └── test_client: HTTPX AsyncClient with the app's lifespan running
"""

import os
import tempfile
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before anything imports app.config: the module-level settings and
# the module-level app in app.main are built from these values.
_TEST_ROOT = tempfile.mkdtemp(prefix="catalog_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/default.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["LOG_LEVEL"] = "WARNING"

from app.config import Settings  # noqa: E402
from app.database import build_engine, build_session_factory, create_tables  # noqa: E402
from app.services.image_store import ImageStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Fresh database file and upload directory for each test."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        upload_dir=str(tmp_path / "uploads"),
        log_level="WARNING",
    )


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def image_store(temp_storage):
    store = ImageStore(temp_storage)
    store.ensure_directory()
    return store


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: SOI marker + JFIF header + EOI marker.

    Content is never inspected by the backend; any bytes would do.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_product_data():
    return {"name": "Pen", "price": "1.5", "description": "Blue ink"}


@pytest_asyncio.fixture
async def db_session(test_settings):
    """
    Real async session on a SQLite file with the products table created.

    Commits are left to the test, mirroring get_db_session.
    """
    engine = build_engine(test_settings)
    await create_tables(engine)
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def mock_repository():
    """AsyncMock with the ProductRepository interface."""
    repository = AsyncMock()
    repository.create = AsyncMock()
    repository.list_all = AsyncMock(return_value=[])
    repository.get_by_id = AsyncMock(return_value=None)
    repository.update_by_id = AsyncMock(return_value=None)
    repository.delete_by_id = AsyncMock(return_value=None)
    repository.commit = AsyncMock()
    return repository


@pytest.fixture
def test_app(test_settings):
    from app.main import create_app
    return create_app(test_settings)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not send lifespan events, so the lifespan is entered
    here to create the upload directory and the tables.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/products")
            assert response.status_code == 200
    """
    from app.main import lifespan

    async with lifespan(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
