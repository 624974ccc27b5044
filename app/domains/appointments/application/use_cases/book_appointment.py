"""
Book Appointment Use Case

Reserves a doctor time slot and creates the appointment in one atomic unit.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, time

from app.core.domain import (
    DoctorNotAvailableException,
    DomainException,
    InternalException,
    ValidationException,
)
from app.domains.appointments.application.ports.collaborators import INotificationDispatcher
from app.domains.appointments.application.ports.unit_of_work import UnitOfWorkFactory
from app.domains.appointments.application.use_cases.dispatch import hand_off_notifications
from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.entities.notification import Notification
from app.domains.appointments.domain.services.notifications import NotificationComposer
from app.domains.appointments.domain.value_objects.appointment_status import ConsultationMode, SlotKey

logger = logging.getLogger(__name__)


@dataclass
class BookAppointmentRequest:
    """Request for booking an appointment."""

    patient_id: int
    doctor_id: int
    appointment_date: date
    appointment_time: time
    consultation_mode: ConsultationMode
    reason: str | None = None
    patient_name: str | None = None


@dataclass
class BookAppointmentResponse:
    """Response from booking an appointment."""

    appointment: Appointment
    notifications: list[Notification] = field(default_factory=list)


class BookAppointmentUseCase:
    """
    Use case for booking appointments.

    Steps, all inside one unit of work:
    1. Doctor exists, is available and supports the consultation mode
    2. Slot (doctor, date, time) is reserved with a check-and-set
    3. Appointment is created as scheduled with the doctor's current fee
    4. Confirmation (patient) and new-appointment (doctor) notifications are built

    Notifications are handed to the dispatcher once the unit has committed.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        dispatcher: INotificationDispatcher | None = None,
        composer: NotificationComposer | None = None,
        reason_max_length: int = 500,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize use case with dependencies.

        Args:
            uow_factory: Creates a fresh unit of work per booking
            dispatcher: Receives notifications after commit
            composer: Builds notification records
            reason_max_length: Maximum length of the visit reason
            clock: Server clock used to reject bookings in the past
        """
        self.uow_factory = uow_factory
        self.dispatcher = dispatcher
        self.composer = composer or NotificationComposer()
        self.reason_max_length = reason_max_length
        self.clock = clock

    def _validate(self, request: BookAppointmentRequest) -> None:
        if request.patient_id <= 0:
            raise ValidationException("Patient ID must be positive", field="patient_id")
        if request.doctor_id <= 0:
            raise ValidationException("Doctor ID must be positive", field="doctor_id")
        if request.reason is not None and len(request.reason) > self.reason_max_length:
            raise ValidationException(
                f"Reason must be at most {self.reason_max_length} characters",
                field="reason",
            )

        requested_at = datetime.combine(request.appointment_date, request.appointment_time)
        if requested_at < self.clock():
            raise ValidationException("Cannot book an appointment in the past", field="appointment_date")

    async def execute(self, request: BookAppointmentRequest) -> BookAppointmentResponse:
        """
        Execute appointment booking use case.

        Args:
            request: Booking request parameters

        Returns:
            Booking response with the scheduled appointment

        Raises:
            ValidationException: Malformed request or date in the past
            DoctorNotAvailableException: Unknown or unavailable doctor, unsupported mode
            SlotConflictException: Slot missing or already booked
            InternalException: Unexpected failure, the unit was rolled back
        """
        self._validate(request)
        key = SlotKey(
            doctor_id=request.doctor_id,
            slot_date=request.appointment_date,
            slot_time=request.appointment_time,
        )

        try:
            async with self.uow_factory() as uow:
                # 1. Verify doctor can take this booking
                doctor = await uow.doctors.find_by_id(request.doctor_id)
                if doctor is None or not doctor.can_accept_appointments():
                    raise DoctorNotAvailableException(
                        doctor_id=request.doctor_id,
                        reason="not_found_or_unavailable",
                        message="Doctor not found or not available",
                    )
                if not doctor.supports_mode(request.consultation_mode):
                    raise DoctorNotAvailableException(
                        doctor_id=request.doctor_id,
                        reason="unsupported_mode",
                        message=f"Doctor does not support {request.consultation_mode.value} consultations",
                    )

                # 2. Reserve slot
                slot = await uow.slots.reserve(key)

                # 3. Create appointment with fee snapshot
                appointment = Appointment.schedule(
                    patient_id=request.patient_id,
                    doctor=doctor,
                    slot=slot,
                    mode=request.consultation_mode,
                    reason=request.reason,
                )
                appointment = await uow.appointments.save(appointment)

                # 4. Build notifications
                notifications = self.composer.booking(appointment, patient_name=request.patient_name)

                await uow.commit()

        except DomainException as e:
            logger.warning(f"Booking rejected for doctor {request.doctor_id} at {key}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error booking appointment: {e}", exc_info=True)
            raise InternalException("book appointment", e) from e

        logger.info(
            f"Appointment booked: {appointment.id} for patient {request.patient_id} "
            f"with doctor {request.doctor_id} on {key}"
        )

        await hand_off_notifications(self.dispatcher, notifications)
        return BookAppointmentResponse(appointment=appointment, notifications=notifications)
