"""
TREE Uniformes - Database Session
"""
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import select

from storefront.core.config import settings

logger = logging.getLogger(__name__)

# Engine asincrono
engine = create_async_engine(
    settings.db_url,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

# Base para models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency para inyectar la sesion de base de datos"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def ensure_default_admin(session: AsyncSession):
    """
    Crea el usuario administrador por defecto si no existe ningun admin.

    Las credenciales salen de ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD.
    """
    from storefront.core.security import get_password_hash
    from storefront.models import User, UserRole

    result = await session.execute(
        select(User).where(User.role == UserRole.ADMIN.value).limit(1)
    )
    if result.scalar_one_or_none():
        logger.info("Usuario admin ya existe")
        return None

    admin = User(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
        first_name="Administrador",
        last_name="Sistema",
        role=UserRole.ADMIN.value,
        is_active=True,
    )
    session.add(admin)
    await session.commit()
    logger.info(f"Usuario admin creado: {settings.ADMIN_USERNAME}")
    return admin


async def init_db():
    """Inicializa la base de datos (crea tablas) y el admin por defecto"""
    # Registra todos los modelos en Base.metadata
    import storefront.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        try:
            await ensure_default_admin(session)
        except Exception as e:
            logger.error(f"Error creando usuario admin: {e}")
            await session.rollback()
