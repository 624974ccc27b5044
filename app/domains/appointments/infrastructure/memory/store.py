"""
In-memory storage backend

Process-local store used by the test-suite and for local development.
"""

import asyncio
import copy
import itertools
import logging
from collections.abc import AsyncIterator, Callable
from datetime import UTC, date, datetime
from types import TracebackType
from typing import Self

from app.core.domain import DuplicateEntityException, SlotConflictException
from app.domains.appointments.application.ports.collaborators import ISlotSource, SlotSpec
from app.domains.appointments.application.ports.unit_of_work import IUnitOfWork
from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.entities.doctor import Doctor
from app.domains.appointments.domain.entities.time_slot import TimeSlot
from app.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus, SlotKey

logger = logging.getLogger(__name__)

UndoLog = list[Callable[[], None]]


class InMemoryStore:
    """
    Tables kept as dicts of entity copies.

    `lock` is held by a unit of work for its whole lifetime, so units run
    one at a time and a reader never sees another unit's partial writes.
    """

    def __init__(self):
        self.lock = asyncio.Lock()
        self.doctors: dict[int, Doctor] = {}
        self.slots: dict[int, TimeSlot] = {}
        self.slot_index: dict[SlotKey, int] = {}
        self.appointments: dict[int, Appointment] = {}
        self._sequences: dict[str, itertools.count] = {}

    def next_id(self, table: str) -> int:
        if table not in self._sequences:
            self._sequences[table] = itertools.count(1)
        return next(self._sequences[table])


def _put(undo: UndoLog, table: dict, key, value) -> None:
    """Write table[key] and log how to restore the previous state."""
    if key in table:
        previous = table[key]
        undo.append(lambda: table.__setitem__(key, previous))
    else:
        undo.append(lambda: table.pop(key, None))
    table[key] = value


class FreeSlotIterable:
    """Restartable async iterable of free slots; every iteration re-reads the store."""

    def __init__(self, store: InMemoryStore, doctor_id: int, date_from: date, date_to: date):
        self.store = store
        self.doctor_id = doctor_id
        self.date_from = date_from
        self.date_to = date_to

    async def __aiter__(self) -> AsyncIterator[TimeSlot]:
        matches = sorted(
            (
                slot
                for slot in self.store.slots.values()
                if slot.doctor_id == self.doctor_id
                and not slot.is_booked
                and slot.slot_date is not None
                and self.date_from <= slot.slot_date <= self.date_to
            ),
            key=lambda s: (s.slot_date, s.slot_time),
        )
        for slot in matches:
            yield copy.deepcopy(slot)


class InMemorySlotRegistry:
    """Slot registry over InMemoryStore."""

    def __init__(self, store: InMemoryStore, undo: UndoLog):
        self.store = store
        self.undo = undo

    async def reserve(self, key: SlotKey) -> TimeSlot:
        slot_id = self.store.slot_index.get(key)
        current = self.store.slots.get(slot_id) if slot_id is not None else None
        if current is None or current.is_booked:
            raise SlotConflictException(doctor_id=key.doctor_id, time_slot=str(key))

        booked = copy.deepcopy(current)
        booked.book()
        _put(self.undo, self.store.slots, booked.id, booked)
        return copy.deepcopy(booked)

    async def release(self, slot_id: int) -> None:
        current = self.store.slots.get(slot_id)
        if current is None or not current.is_booked:
            return

        freed = copy.deepcopy(current)
        freed.release()
        _put(self.undo, self.store.slots, slot_id, freed)

    def lookup(self, doctor_id: int, date_from: date, date_to: date) -> FreeSlotIterable:
        return FreeSlotIterable(self.store, doctor_id, date_from, date_to)

    async def find_by_id(self, slot_id: int) -> TimeSlot | None:
        slot = self.store.slots.get(slot_id)
        return copy.deepcopy(slot) if slot else None


class InMemoryAppointmentRepository:
    """Appointment repository over InMemoryStore."""

    def __init__(self, store: InMemoryStore, undo: UndoLog):
        self.store = store
        self.undo = undo

    async def find_by_id(self, appointment_id: int, for_update: bool = False) -> Appointment | None:
        # The unit already holds the store lock
        appointment = self.store.appointments.get(appointment_id)
        return copy.deepcopy(appointment) if appointment else None

    async def find_many(
        self,
        patient_id: int | None = None,
        doctor_user_id: int | None = None,
        status: AppointmentStatus | None = None,
        from_date: date | None = None,
    ) -> list[Appointment]:
        matches = [
            a
            for a in self.store.appointments.values()
            if (patient_id is None or a.patient_id == patient_id)
            and (doctor_user_id is None or a.doctor_user_id == doctor_user_id)
            and (status is None or a.status == status)
            and (from_date is None or (a.appointment_date is not None and a.appointment_date >= from_date))
        ]
        matches.sort(key=lambda a: (a.appointment_date, a.appointment_time), reverse=True)
        return [copy.deepcopy(a) for a in matches]

    async def save(self, appointment: Appointment) -> Appointment:
        if appointment.id is None:
            appointment.id = self.store.next_id("appointments")
        else:
            appointment.increment_version()

        _put(self.undo, self.store.appointments, appointment.id, copy.deepcopy(appointment))
        return appointment


class InMemoryDoctorRepository:
    """Doctor repository over InMemoryStore."""

    def __init__(self, store: InMemoryStore, undo: UndoLog):
        self.store = store
        self.undo = undo

    async def find_by_id(self, doctor_id: int) -> Doctor | None:
        doctor = self.store.doctors.get(doctor_id)
        return copy.deepcopy(doctor) if doctor else None

    async def save(self, doctor: Doctor) -> Doctor:
        if doctor.id is None:
            doctor.id = self.store.next_id("doctors")
        _put(self.undo, self.store.doctors, doctor.id, copy.deepcopy(doctor))
        return doctor


class InMemoryUnitOfWork(IUnitOfWork):
    """
    Unit of work over InMemoryStore.

    Holds the store lock from enter to exit. Every write is recorded in an
    undo log that `rollback()` replays in reverse order.
    """

    def __init__(self, store: InMemoryStore):
        self.store = store
        self._undo: UndoLog = []
        self._committed = False

    async def __aenter__(self) -> Self:
        await self.store.lock.acquire()
        self._undo = []
        self._committed = False
        self.slots = InMemorySlotRegistry(self.store, self._undo)
        self.appointments = InMemoryAppointmentRepository(self.store, self._undo)
        self.doctors = InMemoryDoctorRepository(self.store, self._undo)
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
            self.store.lock.release()

    async def commit(self) -> None:
        self._undo.clear()
        self._committed = True

    async def rollback(self) -> None:
        if self._undo:
            logger.debug(f"Rolling back {len(self._undo)} in-memory writes")
        while self._undo:
            self._undo.pop()()


class InMemorySlotSource(ISlotSource):
    """Creates free slots in an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create_slots(self, doctor_id: int, schedule: list[SlotSpec]) -> list[TimeSlot]:
        async with self.store.lock:
            keys = [SlotKey(doctor_id=doctor_id, slot_date=s.slot_date, slot_time=s.slot_time) for s in schedule]
            if len(set(keys)) != len(keys):
                raise DuplicateEntityException("TimeSlot", "slot", f"duplicate key in batch for doctor {doctor_id}")
            for key in keys:
                if key in self.store.slot_index:
                    raise DuplicateEntityException("TimeSlot", "slot", f"{doctor_id}@{key}")

            created: list[TimeSlot] = []
            for key, spec in zip(keys, schedule):
                slot = TimeSlot(
                    id=self.store.next_id("slots"),
                    doctor_id=doctor_id,
                    slot_date=spec.slot_date,
                    slot_time=spec.slot_time,
                    duration_minutes=spec.duration_minutes,
                    consultation_mode=spec.consultation_mode,
                    is_booked=False,
                    created_at=datetime.now(UTC),
                )
                self.store.slots[slot.id] = slot
                self.store.slot_index[key] = slot.id
                created.append(copy.deepcopy(slot))

        logger.info(f"Created {len(created)} in-memory slots for doctor {doctor_id}")
        return created
