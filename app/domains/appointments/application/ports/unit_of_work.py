"""
Unit of Work Port

Atomic unit spanning slot, appointment and doctor mutations.
"""

from collections.abc import Callable
from types import TracebackType
from typing import Protocol, Self, runtime_checkable

from app.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from app.domains.appointments.application.ports.doctor_repository import IDoctorRepository
from app.domains.appointments.application.ports.slot_registry import ISlotRegistry


@runtime_checkable
class IUnitOfWork(Protocol):
    """
    Unit of work interface.

    Every mutation made through the exposed repositories is committed
    together or not at all. Leaving the context without `commit()` rolls
    the unit back.

    Example:
        ```python
        async with uow_factory() as uow:
            slot = await uow.slots.reserve(key)
            appointment = await uow.appointments.save(appointment)
            await uow.commit()
        ```
    """

    slots: ISlotRegistry
    appointments: IAppointmentRepository
    doctors: IDoctorRepository

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None:
        """Make every mutation of the unit durable and visible."""
        ...

    async def rollback(self) -> None:
        """Discard every mutation of the unit."""
        ...


UnitOfWorkFactory = Callable[[], IUnitOfWork]
