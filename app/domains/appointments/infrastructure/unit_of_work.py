"""
SQLAlchemy Unit of Work

One AsyncSession, one transaction per unit.
"""

import logging
from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domains.appointments.application.ports.unit_of_work import IUnitOfWork
from app.domains.appointments.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyDoctorRepository,
    SQLAlchemySlotRegistry,
)

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """
    Unit of work over a single async session.

    Repositories flush; only `commit()` makes their writes visible. Leaving
    the context without committing rolls everything back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None
        self._committed = False

    async def __aenter__(self) -> Self:
        self.session = self.session_factory()
        self._committed = False
        self.slots = SQLAlchemySlotRegistry(self.session)
        self.appointments = SQLAlchemyAppointmentRepository(self.session)
        self.doctors = SQLAlchemyDoctorRepository(self.session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if not self._committed:
                await self.rollback()
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def commit(self) -> None:
        if self.session is None:
            raise RuntimeError("Unit of work is not active")
        await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        if self.session is None:
            return
        await self.session.rollback()
        logger.debug("Unit of work rolled back")
