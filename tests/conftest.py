"""
Shared pytest fixtures for all tests.

This module provides the in-memory storage backend, seeded doctors and
slots, principals for every role, and ready-to-use use cases.
"""

import os
from datetime import date, time, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("NOTIFICATION_BACKEND", "memory")

from app.domains.appointments.application.ports import SlotSpec  # noqa: E402
from app.domains.appointments.application.use_cases import (  # noqa: E402
    BookAppointmentRequest,
    BookAppointmentUseCase,
    CancelAppointmentUseCase,
    GetAppointmentUseCase,
    ListAppointmentsUseCase,
    ListFreeSlotsUseCase,
    UpdateAppointmentStatusUseCase,
)
from app.domains.appointments.domain import (  # noqa: E402
    Appointment,
    AppointmentStateMachine,
    AuthorizationGate,
    ConsultationMode,
    Doctor,
    Principal,
    Role,
    TimeSlot,
)
from app.domains.appointments.infrastructure.memory import (  # noqa: E402
    InMemorySlotSource,
    InMemoryStore,
    InMemoryUnitOfWork,
)
from app.domains.appointments.infrastructure.notifications import InMemoryNotificationDispatcher  # noqa: E402
from tests.utils import (  # noqa: E402
    ADMIN_ID,
    DOCTOR_USER_ID,
    OTHER_DOCTOR_USER_ID,
    OTHER_PATIENT_ID,
    PATIENT_ID,
    save_doctor,
)


# ============================================================================
# DATES
# ============================================================================


@pytest.fixture
def future_day() -> date:
    """A day safely in the future for booking."""
    return date.today() + timedelta(days=7)


# ============================================================================
# PRINCIPALS
# ============================================================================


@pytest.fixture
def patient() -> Principal:
    return Principal(user_id=PATIENT_ID, role=Role.PATIENT, name="Juan Gómez")


@pytest.fixture
def other_patient() -> Principal:
    return Principal(user_id=OTHER_PATIENT_ID, role=Role.PATIENT, name="María López")


@pytest.fixture
def doctor_principal() -> Principal:
    return Principal(user_id=DOCTOR_USER_ID, role=Role.DOCTOR)


@pytest.fixture
def other_doctor_principal() -> Principal:
    return Principal(user_id=OTHER_DOCTOR_USER_ID, role=Role.DOCTOR)


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=ADMIN_ID, role=Role.ADMIN)


# ============================================================================
# IN-MEMORY STORAGE FIXTURES
# ============================================================================


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh in-memory store per test."""
    return InMemoryStore()


@pytest.fixture
def uow_factory(store):
    """Unit of work factory bound to the test store."""
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def dispatcher() -> InMemoryNotificationDispatcher:
    return InMemoryNotificationDispatcher()


@pytest_asyncio.fixture
async def doctor(store) -> Doctor:
    """Available doctor offering both modes, fee 50."""
    return await save_doctor(
        store,
        Doctor(
            user_id=DOCTOR_USER_ID,
            first_name="Ana",
            last_name="Pérez",
            specialization="Cardiology",
            consultation_fee=Decimal("50.00"),
        ),
    )


@pytest_asyncio.fixture
async def slots(store, doctor, future_day) -> list[TimeSlot]:
    """Three free slots for the doctor: 09:00, 09:30, 10:00."""
    source = InMemorySlotSource(store)
    return await source.create_slots(
        doctor.id,
        [
            SlotSpec(slot_date=future_day, slot_time=time(9, 0)),
            SlotSpec(slot_date=future_day, slot_time=time(9, 30)),
            SlotSpec(slot_date=future_day, slot_time=time(10, 0)),
        ],
    )


# ============================================================================
# USE CASE FIXTURES
# ============================================================================


@pytest.fixture
def gate() -> AuthorizationGate:
    return AuthorizationGate()


@pytest.fixture
def state_machine() -> AppointmentStateMachine:
    return AppointmentStateMachine()


@pytest.fixture
def book_use_case(uow_factory, dispatcher) -> BookAppointmentUseCase:
    return BookAppointmentUseCase(uow_factory=uow_factory, dispatcher=dispatcher)


@pytest.fixture
def cancel_use_case(uow_factory, dispatcher, gate, state_machine) -> CancelAppointmentUseCase:
    return CancelAppointmentUseCase(
        uow_factory=uow_factory,
        dispatcher=dispatcher,
        gate=gate,
        state_machine=state_machine,
    )


@pytest.fixture
def update_status_use_case(uow_factory, dispatcher, gate, state_machine) -> UpdateAppointmentStatusUseCase:
    return UpdateAppointmentStatusUseCase(
        uow_factory=uow_factory,
        dispatcher=dispatcher,
        gate=gate,
        state_machine=state_machine,
    )


@pytest.fixture
def list_use_case(uow_factory) -> ListAppointmentsUseCase:
    return ListAppointmentsUseCase(uow_factory=uow_factory)


@pytest.fixture
def get_use_case(uow_factory, gate) -> GetAppointmentUseCase:
    return GetAppointmentUseCase(uow_factory=uow_factory, gate=gate)


@pytest.fixture
def free_slots_use_case(uow_factory) -> ListFreeSlotsUseCase:
    return ListFreeSlotsUseCase(uow_factory=uow_factory)


@pytest.fixture
def booking_request(doctor, slots, future_day):
    """Factory for booking requests against the seeded doctor."""

    def _make(
        patient_id: int = PATIENT_ID,
        slot_time: time = time(9, 0),
        mode: ConsultationMode = ConsultationMode.ONLINE,
        reason: str | None = "Chest pain",
    ) -> BookAppointmentRequest:
        return BookAppointmentRequest(
            patient_id=patient_id,
            doctor_id=doctor.id,
            appointment_date=future_day,
            appointment_time=slot_time,
            consultation_mode=mode,
            reason=reason,
        )

    return _make


@pytest_asyncio.fixture
async def booked_appointment(book_use_case, booking_request, dispatcher) -> Appointment:
    """Appointment booked by PATIENT_ID on the 09:00 slot; dispatcher cleared."""
    result = await book_use_case.execute(booking_request())
    dispatcher.clear()
    return result.appointment


# ============================================================================
# SQLALCHEMY FIXTURES
# ============================================================================


@pytest.fixture
def mock_async_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session
