"""
List Free Slots Use Case

Read-side view over the slot registry lookup.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from app.core.domain import EntityNotFoundException, InternalException, ValidationException
from app.domains.appointments.application.ports.unit_of_work import UnitOfWorkFactory
from app.domains.appointments.domain.entities.time_slot import TimeSlot

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 90


@dataclass
class ListFreeSlotsRequest:
    """Request for a doctor's free slots."""

    doctor_id: int
    date_from: date
    date_to: date | None = None


@dataclass
class ListFreeSlotsResponse:
    """Free slots ordered by date and time."""

    doctor_id: int
    slots: list[TimeSlot] = field(default_factory=list)


class ListFreeSlotsUseCase:
    """Use case for listing free slots of a doctor in a date range."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    async def execute(self, request: ListFreeSlotsRequest) -> ListFreeSlotsResponse:
        date_to = request.date_to or request.date_from
        if date_to < request.date_from:
            raise ValidationException("date_to must not be before date_from", field="date_to")
        if date_to - request.date_from > timedelta(days=MAX_RANGE_DAYS):
            raise ValidationException(f"Date range must not exceed {MAX_RANGE_DAYS} days", field="date_to")

        try:
            async with self.uow_factory() as uow:
                doctor = await uow.doctors.find_by_id(request.doctor_id)
                if doctor is None:
                    raise EntityNotFoundException("Doctor", request.doctor_id)

                slots = [slot async for slot in uow.slots.lookup(request.doctor_id, request.date_from, date_to)]
        except EntityNotFoundException:
            raise
        except Exception as e:
            logger.error(f"Error listing slots for doctor {request.doctor_id}: {e}", exc_info=True)
            raise InternalException("list free slots", e) from e

        return ListFreeSlotsResponse(doctor_id=request.doctor_id, slots=slots)
