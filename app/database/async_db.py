import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import quote_plus

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def get_async_database_url(settings: Settings | None = None) -> str:
    """Construye la URL de la base de datos asíncrona"""
    settings = settings or get_settings()

    # Valores requeridos
    host = settings.DB_HOST or "localhost"
    port = settings.DB_PORT or 5432
    user = settings.DB_USER or "postgres"
    database = settings.DB_NAME
    password = settings.DB_PASSWORD

    # Validar database name (obligatorio)
    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    # Escapar caracteres especiales en credenciales
    encoded_user = quote_plus(user)

    if password:
        encoded_password = quote_plus(password)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine(settings: Settings | None = None) -> AsyncEngine:
    """Crea el engine de base de datos asíncrono"""
    settings = settings or get_settings()
    try:
        database_url = get_async_database_url(settings)

        # Configuración base común
        base_config = {
            "echo": settings.DB_ECHO,
            "pool_pre_ping": True,
        }

        if settings.DEBUG:
            # Para desarrollo: usar NullPool (sin pooling)
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config = {
                **base_config,
                "poolclass": NullPool,
            }
        else:
            # Async engines default to AsyncAdaptedQueuePool
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config = {
                **base_config,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
            }

        return create_async_engine(database_url, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


_async_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_async_engine() -> AsyncEngine:
    """Engine compartido, creado en el primer uso"""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_database_engine()
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session maker asíncrono ligado al engine compartido"""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_async_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def dispose_async_engine() -> None:
    """Cierra las conexiones del pool (shutdown)"""
    global _async_engine, _session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("Async database engine disposed")
    _async_engine = None
    _session_factory = None


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency para obtener la sesión de base de datos asíncrona
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise


@asynccontextmanager
async def get_async_db_context():
    """
    Context manager para operaciones de base de datos asíncronas
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise
