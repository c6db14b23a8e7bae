"""
Shared fixtures.

The environment is configured before anything from ``app`` is imported:
settings are read at import time. Every test gets a freshly created SQLite
schema; the engine pool is disposed afterwards so no aiosqlite connection
outlives its event loop.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="inventory-tests-")

os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_PATH"] = os.path.join(_TMP_DIR, "test.db")
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["APP_TIMEZONE"] = "UTC"

import pytest
from httpx import AsyncClient, ASGITransport

from app.core.db import Base, engine, AsyncSessionLocal
from app.core.security import create_access_token
from app.models.users.user_models import User
from app.models.masters.product_models import Product
from app.models.masters.warehouse_models import Warehouse
from app.schemas.inventory.movement_schemas import movement_create_adapter
from app.services.inventory.movement_service import create_movement
from main import app


# =============================================================================
# Database
# =============================================================================


@pytest.fixture(autouse=True)
async def _schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def db():
    """Setup/read session. Writes made through it are committed immediately."""
    async with AsyncSessionLocal() as session:
        yield session


# =============================================================================
# Users & auth
# =============================================================================


async def _make_user(session, username: str, role: str) -> User:
    user = User(username=username, password_hash="not-a-real-hash", role=role)
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def admin(db):
    return await _make_user(db, "admin", "administrator")


@pytest.fixture
async def operator(db):
    return await _make_user(db, "operator", "operator")


@pytest.fixture
async def viewer(db):
    return await _make_user(db, "viewer", "viewer")


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token(user.username, user.token_version)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


# =============================================================================
# Master data factories
# =============================================================================


@pytest.fixture
def make_product(db, admin):
    counter = {"n": 0}

    async def _make(code: str | None = None, *, min_stock: int = 0, is_active: bool = True, **extra):
        counter["n"] += 1
        code = code or f"P-{counter['n']:03d}"
        product = Product(
            code=code,
            name=extra.pop("name", f"Product {code}"),
            min_stock=min_stock,
            is_active=is_active,
            created_by_id=admin.id,
            **extra,
        )
        db.add(product)
        await db.commit()
        return product

    return _make


@pytest.fixture
def make_warehouse(db, admin):
    counter = {"n": 0}

    async def _make(name: str | None = None, *, is_active: bool = True):
        counter["n"] += 1
        warehouse = Warehouse(
            name=name or f"Warehouse {counter['n']}",
            is_active=is_active,
            created_by_id=admin.id,
        )
        db.add(warehouse)
        await db.commit()
        return warehouse

    return _make


# =============================================================================
# Movement processor
# =============================================================================


@pytest.fixture
def record():
    """
    Run the movement processor in its own session, as a request would.

    A rollback there never expires objects owned by the ``db`` fixture.
    """

    async def _record(user: User, **payload):
        async with AsyncSessionLocal() as session:
            return await create_movement(
                session,
                movement_create_adapter.validate_python(payload),
                user,
            )

    return _record
