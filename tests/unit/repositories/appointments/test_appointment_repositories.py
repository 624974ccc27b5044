"""
Unit tests for Appointments Domain Repositories.

Tests the SQLAlchemy data access layer for slots, doctors and appointments
against a mocked AsyncSession.
"""

from datetime import date, time
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.core.domain import DuplicateEntityException, InvalidStateException, SlotConflictException
from app.domains.appointments.application.ports import SlotSpec
from app.domains.appointments.domain import (
    Appointment,
    AppointmentStatus,
    ConsultationMode,
    Doctor,
    Role,
)
from app.domains.appointments.domain.value_objects.appointment_status import SlotKey
from app.domains.appointments.infrastructure.persistence.sqlalchemy.models import AppointmentModel
from app.domains.appointments.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyDoctorRepository,
    SQLAlchemySlotRegistry,
    SQLAlchemySlotSource,
)
from tests.utils import (
    DOCTOR_USER_ID,
    PATIENT_ID,
    create_mock_appointment_model,
    create_mock_doctor_model,
    create_mock_slot_model,
)


def _result(one=None, many=None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = one
    result.scalars.return_value = many or []
    result.unique.return_value.scalars.return_value.all.return_value = many or []
    return result


# ============================================================================
# Slot Registry Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_reserve_returns_booked_slot(mock_async_session):
    """Test reserve maps the row returned by the conditional update."""
    # Arrange
    mock_async_session.execute.return_value = _result(one=create_mock_slot_model(is_booked=True))
    registry = SQLAlchemySlotRegistry(mock_async_session)
    key = SlotKey(doctor_id=7, slot_date=date(2030, 6, 1), slot_time=time(9, 0))

    # Act
    slot = await registry.reserve(key)

    # Assert
    assert slot.id == 3
    assert slot.is_booked is True
    assert slot.key == key
    mock_async_session.execute.assert_awaited_once()
    mock_async_session.commit.assert_not_called()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_reserve_conflict_when_no_row_matches(mock_async_session):
    """Test reserve raises SlotConflictException when the update matched nothing."""
    mock_async_session.execute.return_value = _result(one=None)
    registry = SQLAlchemySlotRegistry(mock_async_session)

    with pytest.raises(SlotConflictException):
        await registry.reserve(SlotKey(doctor_id=7, slot_date=date(2030, 6, 1), slot_time=time(9, 0)))


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_release_issues_update(mock_async_session):
    registry = SQLAlchemySlotRegistry(mock_async_session)

    await registry.release(3)

    mock_async_session.execute.assert_awaited_once()
    mock_async_session.commit.assert_not_called()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_lookup_requeries_on_each_iteration(mock_async_session):
    """Test the free slot lookup runs a fresh query every time it is iterated."""
    mock_async_session.execute.return_value = _result(
        many=[create_mock_slot_model(slot_id=3), create_mock_slot_model(slot_id=4, slot_time=time(9, 30))]
    )
    registry = SQLAlchemySlotRegistry(mock_async_session)
    lookup = registry.lookup(7, date(2030, 6, 1), date(2030, 6, 1))

    first = [s.id async for s in lookup]
    second = [s.id async for s in lookup]

    assert first == second == [3, 4]
    assert mock_async_session.execute.await_count == 2


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_slot_source_rejects_duplicate_in_batch(mock_async_session):
    source = SQLAlchemySlotSource(mock_async_session)
    spec = SlotSpec(slot_date=date(2030, 6, 1), slot_time=time(9, 0))

    with pytest.raises(DuplicateEntityException):
        await source.create_slots(7, [spec, spec])

    mock_async_session.add_all.assert_not_called()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_slot_source_maps_integrity_error(mock_async_session):
    """Test a unique constraint violation surfaces as DuplicateEntityException."""
    mock_async_session.flush.side_effect = IntegrityError("INSERT", {}, Exception("uq_time_slot_key"))
    source = SQLAlchemySlotSource(mock_async_session)

    with pytest.raises(DuplicateEntityException):
        await source.create_slots(7, [SlotSpec(slot_date=date(2030, 6, 1), slot_time=time(9, 0))])


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_slot_source_adds_free_slots(mock_async_session):
    source = SQLAlchemySlotSource(mock_async_session)

    created = await source.create_slots(
        7,
        [
            SlotSpec(slot_date=date(2030, 6, 1), slot_time=time(9, 0)),
            SlotSpec(slot_date=date(2030, 6, 1), slot_time=time(9, 30), consultation_mode=ConsultationMode.ONLINE),
        ],
    )

    models = mock_async_session.add_all.call_args.args[0]
    assert len(models) == 2
    assert all(m.is_booked is False for m in models)
    assert models[1].consultation_mode == "ONLINE"
    assert [s.slot_time for s in created] == [time(9, 0), time(9, 30)]


# ============================================================================
# Doctor Repository Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_doctor_find_by_id_success(mock_async_session):
    mock_async_session.execute.return_value = _result(one=create_mock_doctor_model())
    repository = SQLAlchemyDoctorRepository(mock_async_session)

    doctor = await repository.find_by_id(7)

    assert doctor is not None
    assert doctor.user_id == DOCTOR_USER_ID
    assert doctor.consultation_modes == {ConsultationMode.ONLINE, ConsultationMode.OFFLINE}
    assert doctor.consultation_fee == Decimal("50.00")


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_doctor_find_by_id_not_found(mock_async_session):
    mock_async_session.execute.return_value = _result(one=None)
    repository = SQLAlchemyDoctorRepository(mock_async_session)

    assert await repository.find_by_id(999) is None


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_doctor_save_updates_fee(mock_async_session):
    model = create_mock_doctor_model()
    mock_async_session.execute.return_value = _result(one=model)
    repository = SQLAlchemyDoctorRepository(mock_async_session)
    doctor = Doctor(id=7, user_id=DOCTOR_USER_ID, first_name="Ana", last_name="Pérez", consultation_fee=Decimal("70"))

    await repository.save(doctor)

    assert model.consultation_fee == Decimal("70")
    mock_async_session.flush.assert_awaited_once()
    mock_async_session.commit.assert_not_called()


# ============================================================================
# Appointment Repository Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_by_id_maps_doctor(mock_async_session):
    """Test the joined doctor row feeds doctor_user_id and doctor_name."""
    mock_async_session.execute.return_value = _result(one=create_mock_appointment_model())
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    appointment = await repository.find_by_id(1)

    assert appointment is not None
    assert appointment.patient_id == PATIENT_ID
    assert appointment.doctor_user_id == DOCTOR_USER_ID
    assert appointment.doctor_name == "Dr. Ana Pérez"
    assert appointment.consultation_mode == ConsultationMode.ONLINE
    assert appointment.status == AppointmentStatus.SCHEDULED


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_by_id_maps_cancelled_by(mock_async_session):
    mock_async_session.execute.return_value = _result(
        one=create_mock_appointment_model(status=AppointmentStatus.CANCELLED, cancelled_by="doctor")
    )
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    appointment = await repository.find_by_id(1)

    assert appointment.cancelled_by == Role.DOCTOR


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_many(mock_async_session):
    mock_async_session.execute.return_value = _result(
        many=[create_mock_appointment_model(1), create_mock_appointment_model(2)]
    )
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    appointments = await repository.find_many(patient_id=PATIENT_ID, status=AppointmentStatus.SCHEDULED)

    assert [a.id for a in appointments] == [1, 2]
    mock_async_session.execute.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_save_new_flushes_without_commit(mock_async_session):
    """Test inserting a new appointment assigns the id from the flushed row."""
    mock_async_session.add.side_effect = lambda model: setattr(model, "id", 55)
    repository = SQLAlchemyAppointmentRepository(mock_async_session)
    appointment = Appointment(
        patient_id=PATIENT_ID,
        doctor_id=7,
        doctor_user_id=DOCTOR_USER_ID,
        slot_id=3,
        appointment_date=date(2030, 6, 1),
        appointment_time=time(9, 0),
        consultation_mode=ConsultationMode.ONLINE,
        consultation_fee=Decimal("50.00"),
    )

    saved = await repository.save(appointment)

    assert saved.id == 55
    added = mock_async_session.add.call_args.args[0]
    assert isinstance(added, AppointmentModel)
    assert added.consultation_mode == "ONLINE"
    assert added.consultation_fee == Decimal("50.00")
    mock_async_session.flush.assert_awaited_once()
    mock_async_session.commit.assert_not_called()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_save_existing_updates_status(mock_async_session):
    model = create_mock_appointment_model()
    mock_async_session.execute.return_value = _result(one=model)
    repository = SQLAlchemyAppointmentRepository(mock_async_session)
    appointment = await repository.find_by_id(1)

    appointment.cancel(cancelled_by=Role.PATIENT)
    await repository.save(appointment)

    assert model.status == AppointmentStatus.CANCELLED
    assert model.cancelled_by == "patient"
    assert model.version == 1
    mock_async_session.add.assert_not_called()


# ============================================================================
# Concurrent writers
# ============================================================================


def _sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_release_only_touches_booked_slot(mock_async_session):
    """Test release of an already free slot matches no row and does not fail."""
    registry = SQLAlchemySlotRegistry(mock_async_session)

    await registry.release(3)
    await registry.release(3)

    assert mock_async_session.execute.await_count == 2
    statement = mock_async_session.execute.call_args.args[0]
    assert "is_booked IS true" in _sql(statement)


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_by_id_locks_row_for_update(mock_async_session):
    mock_async_session.execute.return_value = _result(one=create_mock_appointment_model())
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    await repository.find_by_id(1, for_update=True)

    statement = mock_async_session.execute.call_args.args[0]
    assert "FOR UPDATE OF appointments" in _sql(statement)


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_by_id_plain_read_takes_no_lock(mock_async_session):
    mock_async_session.execute.return_value = _result(one=create_mock_appointment_model())
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    await repository.find_by_id(1)

    statement = mock_async_session.execute.call_args.args[0]
    assert "FOR UPDATE" not in _sql(statement)


@pytest.mark.unit
@pytest.mark.repository
def test_appointment_model_is_version_checked():
    """Test updates carry the loaded version in their WHERE clause."""
    mapper = AppointmentModel.__mapper__

    assert mapper.version_id_col is AppointmentModel.__table__.c.version
    assert mapper.version_id_generator is False


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_save_of_stale_row_raises_invalid_state(mock_async_session):
    """Test a row changed by another unit since it was read is not overwritten."""
    model = create_mock_appointment_model()
    mock_async_session.execute.return_value = _result(one=model)
    repository = SQLAlchemyAppointmentRepository(mock_async_session)
    appointment = await repository.find_by_id(1, for_update=True)
    mock_async_session.flush.side_effect = StaleDataError("UPDATE statement on table 'appointments' matched 0 rows")

    appointment.confirm()
    with pytest.raises(InvalidStateException) as exc_info:
        await repository.save(appointment)

    assert exc_info.value.code == "INVALID_STATE"
    mock_async_session.commit.assert_not_called()
