"""
Factories for creating test objects quickly.

Plain functions with default values: seeded entities for the in-memory
backend and MagicMock rows standing in for SQLAlchemy models.
"""

from datetime import UTC, date, datetime, time
from decimal import Decimal
from unittest.mock import MagicMock

from app.domains.appointments.domain import AppointmentStatus, Doctor, PaymentStatus
from app.domains.appointments.infrastructure.memory import InMemoryStore, InMemoryUnitOfWork

DOCTOR_USER_ID = 42
OTHER_DOCTOR_USER_ID = 43
PATIENT_ID = 10
OTHER_PATIENT_ID = 11
ADMIN_ID = 1


async def save_doctor(store: InMemoryStore, doctor: Doctor) -> Doctor:
    """
    Persist a doctor through a committed unit of work.

    Args:
        store: In-memory store
        doctor: Doctor entity (id assigned when new)

    Returns:
        The saved doctor
    """
    async with InMemoryUnitOfWork(store) as uow:
        doctor = await uow.doctors.save(doctor)
        await uow.commit()
    return doctor


def create_mock_doctor_model(doctor_id: int = 7, user_id: int = DOCTOR_USER_ID, **kwargs) -> MagicMock:
    """Create a mock DoctorModel row."""
    model = MagicMock()
    model.id = doctor_id
    model.user_id = user_id
    model.first_name = "Ana"
    model.last_name = "Pérez"
    model.specialization = "Cardiology"
    model.consultation_modes = ["ONLINE", "OFFLINE"]
    model.consultation_fee = Decimal("50.00")
    model.is_available = True
    model.created_at = datetime.now(UTC)
    model.updated_at = datetime.now(UTC)
    for key, value in kwargs.items():
        setattr(model, key, value)
    return model


def create_mock_slot_model(
    slot_id: int = 3,
    doctor_id: int = 7,
    slot_date: date = date(2030, 6, 1),
    slot_time: time = time(9, 0),
    is_booked: bool = False,
    **kwargs,
) -> MagicMock:
    """Create a mock TimeSlotModel row."""
    model = MagicMock()
    model.id = slot_id
    model.doctor_id = doctor_id
    model.slot_date = slot_date
    model.slot_time = slot_time
    model.duration_minutes = 30
    model.consultation_mode = None
    model.is_booked = is_booked
    model.created_at = datetime.now(UTC)
    model.updated_at = datetime.now(UTC)
    for key, value in kwargs.items():
        setattr(model, key, value)
    return model


def create_mock_appointment_model(
    appointment_id: int = 1,
    patient_id: int = PATIENT_ID,
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    **kwargs,
) -> MagicMock:
    """Create a mock AppointmentModel row with its joined doctor."""
    model = MagicMock()
    model.id = appointment_id
    model.patient_id = patient_id
    model.doctor_id = 7
    model.doctor = create_mock_doctor_model()
    model.slot_id = 3
    model.appointment_date = date(2030, 6, 1)
    model.appointment_time = time(9, 0)
    model.duration_minutes = 30
    model.consultation_mode = "ONLINE"
    model.status = status
    model.reason_for_visit = "Chest pain"
    model.notes = None
    model.prescription = None
    model.consultation_fee = Decimal("50.00")
    model.payment_status = PaymentStatus.PENDING
    model.confirmed_at = None
    model.completed_at = None
    model.cancelled_at = None
    model.cancelled_by = None
    model.version = 0
    model.created_at = datetime.now(UTC)
    model.updated_at = datetime.now(UTC)
    for key, value in kwargs.items():
        setattr(model, key, value)
    return model
