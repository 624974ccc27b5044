"""
Unit tests for the unit of work implementations.
"""

from datetime import date, time
from unittest.mock import MagicMock

import pytest

from app.domains.appointments.application.ports import IAppointmentRepository, IDoctorRepository, SlotSpec
from app.domains.appointments.domain import Doctor
from app.domains.appointments.infrastructure.memory import InMemorySlotSource, InMemoryStore, InMemoryUnitOfWork
from app.domains.appointments.infrastructure.memory.store import InMemoryAppointmentRepository, InMemoryDoctorRepository
from app.domains.appointments.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyDoctorRepository,
    SQLAlchemySlotRegistry,
)
from app.domains.appointments.infrastructure.unit_of_work import SQLAlchemyUnitOfWork


@pytest.fixture
def session_factory(mock_async_session):
    return MagicMock(return_value=mock_async_session)


# ============================================================================
# SQLAlchemy Unit of Work
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_sqlalchemy_uow_wires_repositories_on_one_session(session_factory, mock_async_session):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        assert isinstance(uow.slots, SQLAlchemySlotRegistry)
        assert isinstance(uow.appointments, SQLAlchemyAppointmentRepository)
        assert isinstance(uow.doctors, SQLAlchemyDoctorRepository)
        assert uow.slots.session is uow.appointments.session is uow.doctors.session is mock_async_session
        await uow.commit()

    session_factory.assert_called_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_sqlalchemy_uow_commit_skips_rollback(session_factory, mock_async_session):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        await uow.commit()

    mock_async_session.commit.assert_awaited_once()
    mock_async_session.rollback.assert_not_called()
    mock_async_session.close.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_sqlalchemy_uow_rolls_back_without_commit(session_factory, mock_async_session):
    async with SQLAlchemyUnitOfWork(session_factory):
        pass

    mock_async_session.commit.assert_not_called()
    mock_async_session.rollback.assert_awaited_once()
    mock_async_session.close.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_sqlalchemy_uow_rolls_back_on_error(session_factory, mock_async_session):
    with pytest.raises(RuntimeError):
        async with SQLAlchemyUnitOfWork(session_factory):
            raise RuntimeError("boom")

    mock_async_session.rollback.assert_awaited_once()
    mock_async_session.close.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_sqlalchemy_uow_commit_outside_context_fails(session_factory):
    uow = SQLAlchemyUnitOfWork(session_factory)

    with pytest.raises(RuntimeError):
        await uow.commit()


# ============================================================================
# In-memory Unit of Work
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_memory_uow_discards_uncommitted_writes():
    store = InMemoryStore()

    async with InMemoryUnitOfWork(store) as uow:
        await uow.doctors.save(Doctor(user_id=5, first_name="Eva"))

    assert store.doctors == {}
    assert not store.lock.locked()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_memory_uow_keeps_committed_writes():
    store = InMemoryStore()

    async with InMemoryUnitOfWork(store) as uow:
        doctor = await uow.doctors.save(Doctor(user_id=5, first_name="Eva"))
        await uow.commit()

    assert store.doctors[doctor.id].first_name == "Eva"


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_memory_uow_restores_overwritten_rows():
    """Test rollback restores the previous value of an updated row."""
    store = InMemoryStore()
    async with InMemoryUnitOfWork(store) as uow:
        doctor = await uow.doctors.save(Doctor(user_id=5, first_name="Eva"))
        await uow.commit()

    with pytest.raises(ValueError):
        async with InMemoryUnitOfWork(store) as uow:
            doctor.first_name = "Changed"
            await uow.doctors.save(doctor)
            raise ValueError("abort")

    assert store.doctors[doctor.id].first_name == "Eva"
    assert not store.lock.locked()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_memory_repositories_return_copies():
    store = InMemoryStore()
    async with InMemoryUnitOfWork(store) as uow:
        doctor = await uow.doctors.save(Doctor(user_id=5, first_name="Eva"))
        await uow.commit()

    async with InMemoryUnitOfWork(store) as uow:
        loaded = await uow.doctors.find_by_id(doctor.id)
        loaded.first_name = "Mutated"

    assert store.doctors[doctor.id].first_name == "Eva"


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_memory_release_of_free_slot_is_noop():
    """Test releasing an already free or unknown slot leaves the store untouched."""
    store = InMemoryStore()
    [slot] = await InMemorySlotSource(store).create_slots(
        7, [SlotSpec(slot_date=date(2030, 6, 1), slot_time=time(9, 0))]
    )

    async with InMemoryUnitOfWork(store) as uow:
        await uow.slots.release(slot.id)
        await uow.slots.release(slot.id)
        await uow.slots.release(999)
        assert uow.slots.undo == []
        await uow.commit()

    assert store.slots[slot.id].is_booked is False
    assert 999 not in store.slots


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_memory_release_twice_after_reserve():
    store = InMemoryStore()
    [slot] = await InMemorySlotSource(store).create_slots(
        7, [SlotSpec(slot_date=date(2030, 6, 1), slot_time=time(9, 0))]
    )

    async with InMemoryUnitOfWork(store) as uow:
        await uow.slots.reserve(slot.key)
        await uow.slots.release(slot.id)
        await uow.slots.release(slot.id)
        await uow.commit()

    assert store.slots[slot.id].is_booked is False


@pytest.mark.unit
@pytest.mark.repository
def test_repositories_satisfy_ports(mock_async_session):
    store = InMemoryStore()

    assert isinstance(InMemoryAppointmentRepository(store, []), IAppointmentRepository)
    assert isinstance(InMemoryDoctorRepository(store, []), IDoctorRepository)
    assert isinstance(SQLAlchemyAppointmentRepository(mock_async_session), IAppointmentRepository)
    assert isinstance(SQLAlchemyDoctorRepository(mock_async_session), IDoctorRepository)
