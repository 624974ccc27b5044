"""
Slot Registry Implementation

SQLAlchemy implementation of ISlotRegistry and ISlotSource.
"""

import logging
from collections.abc import AsyncIterator
from datetime import UTC, date, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import DuplicateEntityException, SlotConflictException
from app.domains.appointments.application.ports.collaborators import ISlotSource, SlotSpec
from app.domains.appointments.application.ports.slot_registry import ISlotRegistry
from app.domains.appointments.domain.entities.time_slot import TimeSlot
from app.domains.appointments.domain.value_objects.appointment_status import ConsultationMode, SlotKey
from app.domains.appointments.infrastructure.persistence.sqlalchemy.models import TimeSlotModel

logger = logging.getLogger(__name__)


def slot_to_entity(model: TimeSlotModel) -> TimeSlot:
    """Convert slot model to entity."""
    return TimeSlot(
        id=model.id,  # type: ignore[arg-type]
        doctor_id=model.doctor_id,  # type: ignore[arg-type]
        slot_date=model.slot_date,  # type: ignore[arg-type]
        slot_time=model.slot_time,  # type: ignore[arg-type]
        duration_minutes=model.duration_minutes or 30,  # type: ignore[arg-type]
        consultation_mode=ConsultationMode(model.consultation_mode) if model.consultation_mode else None,
        is_booked=bool(model.is_booked),
        created_at=model.created_at,  # type: ignore[arg-type]
        updated_at=model.updated_at,  # type: ignore[arg-type]
    )


class FreeSlotLookup:
    """Restartable async iterable of free slots; every iteration re-queries."""

    def __init__(self, session: AsyncSession, doctor_id: int, date_from: date, date_to: date):
        self.session = session
        self.doctor_id = doctor_id
        self.date_from = date_from
        self.date_to = date_to

    async def __aiter__(self) -> AsyncIterator[TimeSlot]:
        result = await self.session.execute(
            select(TimeSlotModel)
            .where(
                TimeSlotModel.doctor_id == self.doctor_id,
                TimeSlotModel.slot_date.between(self.date_from, self.date_to),
                TimeSlotModel.is_booked.is_(False),
            )
            .order_by(TimeSlotModel.slot_date, TimeSlotModel.slot_time)
        )
        for model in result.scalars():
            yield slot_to_entity(model)


class SQLAlchemySlotRegistry(ISlotRegistry):
    """
    SQLAlchemy slot registry.

    `reserve` is a single conditional UPDATE: the row lock taken by the
    database serialises concurrent reservations of the same key, and the
    loser re-evaluates `is_booked = false` and matches no row.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def reserve(self, key: SlotKey) -> TimeSlot:
        """Atomically book the free slot for key."""
        result = await self.session.execute(
            update(TimeSlotModel)
            .where(
                TimeSlotModel.doctor_id == key.doctor_id,
                TimeSlotModel.slot_date == key.slot_date,
                TimeSlotModel.slot_time == key.slot_time,
                TimeSlotModel.is_booked.is_(False),
            )
            .values(is_booked=True, updated_at=datetime.now(UTC))
            .returning(TimeSlotModel)
        )
        model = result.scalar_one_or_none()
        if model is None:
            logger.info(f"Slot conflict for doctor {key.doctor_id} at {key}")
            raise SlotConflictException(doctor_id=key.doctor_id, time_slot=str(key))

        return slot_to_entity(model)

    async def release(self, slot_id: int) -> None:
        """Free a slot; a free or unknown slot is left as is."""
        await self.session.execute(
            update(TimeSlotModel)
            .where(TimeSlotModel.id == slot_id, TimeSlotModel.is_booked.is_(True))
            .values(is_booked=False, updated_at=datetime.now(UTC))
        )

    def lookup(self, doctor_id: int, date_from: date, date_to: date) -> FreeSlotLookup:
        return FreeSlotLookup(self.session, doctor_id, date_from, date_to)

    async def find_by_id(self, slot_id: int) -> TimeSlot | None:
        """Find slot by ID."""
        result = await self.session.execute(select(TimeSlotModel).where(TimeSlotModel.id == slot_id))
        model = result.scalar_one_or_none()
        return slot_to_entity(model) if model else None


class SQLAlchemySlotSource(ISlotSource):
    """Inserts explicitly supplied slots; duplicates abort the whole batch."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_slots(self, doctor_id: int, schedule: list[SlotSpec]) -> list[TimeSlot]:
        seen: set[tuple] = set()
        for spec in schedule:
            key = (spec.slot_date, spec.slot_time)
            if key in seen:
                raise DuplicateEntityException("TimeSlot", "slot", f"{doctor_id}@{spec.slot_date} {spec.slot_time}")
            seen.add(key)

        models = [
            TimeSlotModel(
                doctor_id=doctor_id,
                slot_date=spec.slot_date,
                slot_time=spec.slot_time,
                duration_minutes=spec.duration_minutes,
                consultation_mode=spec.consultation_mode.value if spec.consultation_mode else None,
                is_booked=False,
            )
            for spec in schedule
        ]

        self.session.add_all(models)
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning(f"Duplicate slot for doctor {doctor_id}: {e.orig}")
            raise DuplicateEntityException("TimeSlot", "doctor_id", doctor_id) from e

        logger.info(f"Created {len(models)} slots for doctor {doctor_id}")
        return [slot_to_entity(m) for m in models]
