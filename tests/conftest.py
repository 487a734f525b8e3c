import os
import tempfile

# Configuracion de pruebas antes de importar la aplicacion
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["QUOTE_EXPIRY_SWEEP_ENABLED"] = "false"
os.environ["INVENTORY_RESERVATION_ENABLED"] = "true"
os.environ["RESEND_API_KEY"] = ""
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="tree-uploads-"))

import itertools
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from storefront.database import Base, get_db
from storefront.core import create_access_token, get_password_hash
from storefront.models import User, UserRole, Product, Brand
from storefront.main import app

_sku_seq = itertools.count(1)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # SQLite solo valida llaves foraneas con el pragma activo
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create_user(db, username, email, role, password="secreto123"):
    user = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        first_name=username.capitalize(),
        last_name="Prueba",
        role=role,
        is_active=True
    )
    db.add(user)
    await db.commit()
    return user


def _headers(user: User) -> dict:
    token = create_access_token(data={"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_user(db):
    return await _create_user(db, "admin", "admin@treeuniformes.com", UserRole.ADMIN.value)


@pytest_asyncio.fixture
async def customer_user(db):
    return await _create_user(db, "cliente", "cliente@empresa.com", UserRole.CUSTOMER.value)


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def customer_headers(customer_user):
    return _headers(customer_user)


@pytest.fixture
def make_headers():
    return _headers


@pytest_asyncio.fixture
async def make_product(db):
    async def factory(**overrides):
        values = {
            "name": "Camisa Industrial",
            "sku": None,
            "brand": "TREE",
            "gender": "unisex",
            "genders": ["unisex"],
            "price": Decimal("150.00"),
            "sizes": ["S", "M", "L"],
            "colors": ["Azul"],
            "is_active": True,
        }
        values.update(overrides)
        if not values["sku"]:
            values["sku"] = f"SKU-{next(_sku_seq):04d}"
        product = Product(**values)
        db.add(product)
        await db.commit()
        return product

    return factory


@pytest_asyncio.fixture
async def brand(db):
    row = Brand(name="Kodiak", is_active=True)
    db.add(row)
    await db.commit()
    return row
