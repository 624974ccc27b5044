"""
Tests for CancelAppointmentUseCase against the in-memory backend.
"""

from decimal import Decimal

import pytest

from app.core.domain import (
    AuthorizationException,
    EntityNotFoundException,
    InternalException,
    InvalidStateException,
)
from app.domains.appointments.application.use_cases import (
    CancelAppointmentRequest,
    CancelAppointmentUseCase,
    UpdateAppointmentStatusRequest,
)
from app.domains.appointments.domain import AppointmentStatus, NotificationType, Role
from app.domains.appointments.infrastructure.memory import InMemoryUnitOfWork
from tests.utils import DOCTOR_USER_ID, OTHER_PATIENT_ID, PATIENT_ID, assert_slots_consistent, save_doctor


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_patient_cancels_own_appointment(cancel_use_case, booked_appointment, patient, store, dispatcher):
    """Test the owning patient cancels: slot freed, doctor notified."""
    # Act
    result = await cancel_use_case.execute(
        CancelAppointmentRequest(principal=patient, appointment_id=booked_appointment.id)
    )

    # Assert
    assert result.appointment.status == AppointmentStatus.CANCELLED
    assert result.appointment.cancelled_by == Role.PATIENT
    assert store.slots[booked_appointment.slot_id].is_booked is False
    assert store.appointments[booked_appointment.id].status == AppointmentStatus.CANCELLED
    assert [n.recipient_id for n in dispatcher.sent] == [DOCTOR_USER_ID]
    assert dispatcher.sent[0].type == NotificationType.CANCELLATION
    assert_slots_consistent(store)


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_doctor_cancel_notifies_patient(cancel_use_case, booked_appointment, doctor_principal, dispatcher):
    await cancel_use_case.execute(
        CancelAppointmentRequest(principal=doctor_principal, appointment_id=booked_appointment.id)
    )

    assert [n.recipient_id for n in dispatcher.sent] == [PATIENT_ID]


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_admin_cancel_notifies_both(cancel_use_case, booked_appointment, admin, dispatcher):
    result = await cancel_use_case.execute(CancelAppointmentRequest(principal=admin, appointment_id=booked_appointment.id))

    assert result.appointment.cancelled_by == Role.ADMIN
    assert sorted(n.recipient_id for n in dispatcher.sent) == sorted([PATIENT_ID, DOCTOR_USER_ID])


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_non_owner_patient_is_forbidden(cancel_use_case, booked_appointment, other_patient, store, dispatcher):
    """Test another patient cannot cancel and nothing changes."""
    with pytest.raises(AuthorizationException):
        await cancel_use_case.execute(
            CancelAppointmentRequest(principal=other_patient, appointment_id=booked_appointment.id)
        )

    assert store.appointments[booked_appointment.id].status == AppointmentStatus.SCHEDULED
    assert store.slots[booked_appointment.slot_id].is_booked is True
    assert dispatcher.sent == []


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_other_doctor_is_forbidden(cancel_use_case, booked_appointment, other_doctor_principal):
    with pytest.raises(AuthorizationException):
        await cancel_use_case.execute(
            CancelAppointmentRequest(principal=other_doctor_principal, appointment_id=booked_appointment.id)
        )


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_cancel_unknown_appointment(cancel_use_case, patient, doctor):
    with pytest.raises(EntityNotFoundException):
        await cancel_use_case.execute(CancelAppointmentRequest(principal=patient, appointment_id=999))


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_not_found_checked_before_authorization(cancel_use_case, other_patient, doctor):
    """Test a missing appointment is reported as not found, whoever asks."""
    with pytest.raises(EntityNotFoundException):
        await cancel_use_case.execute(CancelAppointmentRequest(principal=other_patient, appointment_id=12345))


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_cancel_twice_is_invalid_state(cancel_use_case, booked_appointment, patient):
    request = CancelAppointmentRequest(principal=patient, appointment_id=booked_appointment.id)
    await cancel_use_case.execute(request)

    with pytest.raises(InvalidStateException):
        await cancel_use_case.execute(request)


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_forbidden_checked_before_invalid_state(cancel_use_case, booked_appointment, patient, other_patient):
    """Test a stranger gets ForbiddenError even on a terminal appointment."""
    await cancel_use_case.execute(CancelAppointmentRequest(principal=patient, appointment_id=booked_appointment.id))

    with pytest.raises(AuthorizationException):
        await cancel_use_case.execute(
            CancelAppointmentRequest(principal=other_patient, appointment_id=booked_appointment.id)
        )


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_cancel_completed_appointment_is_invalid(
    cancel_use_case, update_status_use_case, booked_appointment, doctor_principal, patient, store
):
    await update_status_use_case.execute(
        UpdateAppointmentStatusRequest(
            principal=doctor_principal,
            appointment_id=booked_appointment.id,
            new_status=AppointmentStatus.COMPLETED,
        )
    )

    with pytest.raises(InvalidStateException):
        await cancel_use_case.execute(CancelAppointmentRequest(principal=patient, appointment_id=booked_appointment.id))

    assert store.slots[booked_appointment.slot_id].is_booked is True


class FailingReleaseUnitOfWork(InMemoryUnitOfWork):
    """Unit of work whose appointment save fails after the slot was released."""

    async def __aenter__(self):
        await super().__aenter__()

        async def broken_save(appointment):
            raise RuntimeError("connection reset")

        self.appointments.save = broken_save
        return self


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_failed_cancel_rolls_back_slot_release(booked_appointment, patient, store, dispatcher):
    """Test a failure after release leaves slot booked and status unchanged."""
    use_case = CancelAppointmentUseCase(uow_factory=lambda: FailingReleaseUnitOfWork(store), dispatcher=dispatcher)

    with pytest.raises(InternalException):
        await use_case.execute(CancelAppointmentRequest(principal=patient, appointment_id=booked_appointment.id))

    assert store.slots[booked_appointment.slot_id].is_booked is True
    assert store.appointments[booked_appointment.id].status == AppointmentStatus.SCHEDULED
    assert dispatcher.sent == []
    assert_slots_consistent(store)


# ============================================================================
# Cancel then rebook
# ============================================================================


@pytest.mark.use_case
@pytest.mark.asyncio
async def test_cancel_then_rebook_same_slot(
    cancel_use_case, book_use_case, booking_request, booked_appointment, patient, store, doctor
):
    """Test a freed slot can be booked again with the current fee."""
    await cancel_use_case.execute(CancelAppointmentRequest(principal=patient, appointment_id=booked_appointment.id))

    doctor.set_consultation_fee(Decimal("65.00"))
    await save_doctor(store, doctor)

    result = await book_use_case.execute(booking_request(patient_id=OTHER_PATIENT_ID))

    assert result.appointment.id != booked_appointment.id
    assert result.appointment.slot_id == booked_appointment.slot_id
    assert result.appointment.consultation_fee == Decimal("65.00")
    assert store.appointments[booked_appointment.id].consultation_fee == Decimal("50.00")
    assert_slots_consistent(store)
