"""
Database Setup - Creación y eliminación del esquema.

Schema migrations are managed outside this service; this module only
creates the tables declared on the shared metadata.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from app.database.async_db import get_async_engine
from app.models.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseSetup:
    """Clase para manejar la configuración de la base de datos."""

    def __init__(self, engine: AsyncEngine | None = None):
        self.engine = engine or get_async_engine()

    @staticmethod
    def _register_models() -> None:
        # Imported for the side effect of registering tables on Base.metadata
        from app.domains.appointments.infrastructure.persistence.sqlalchemy import models  # noqa: F401

    async def create_tables(self) -> None:
        """Crea todas las tablas en la base de datos."""
        self._register_models()
        try:
            async with self.engine.begin() as conn:
                logger.info("Creando tablas...")
                await conn.run_sync(Base.metadata.create_all)
                logger.info("Tablas creadas exitosamente")
        except Exception as e:
            logger.error(f"Error creando tablas: {e}")
            raise

    async def drop_tables(self) -> None:
        """Elimina todas las tablas de la base de datos."""
        self._register_models()
        try:
            async with self.engine.begin() as conn:
                logger.info("Eliminando tablas...")
                await conn.run_sync(Base.metadata.drop_all)
                logger.info("Tablas eliminadas exitosamente")
        except Exception as e:
            logger.error(f"Error eliminando tablas: {e}")
            raise
