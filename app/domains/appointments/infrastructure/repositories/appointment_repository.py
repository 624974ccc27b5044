"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.domain import InvalidStateException
from app.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentStatus,
    ConsultationMode,
    Role,
)
from app.domains.appointments.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    DoctorModel,
)

logger = logging.getLogger(__name__)


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.

    Writes are flushed, never committed: the unit of work owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, appointment_id: int, for_update: bool = False) -> Appointment | None:
        """
        Find appointment by ID.

        With `for_update` the row stays locked until the unit ends, so a
        concurrent cancel or status update waits and then sees this write.
        """
        query = select(AppointmentModel).where(AppointmentModel.id == appointment_id)
        if for_update:
            # Lock only the appointment row, the doctor is on the outer side of the join
            query = query.with_for_update(of=AppointmentModel)

        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_many(
        self,
        patient_id: int | None = None,
        doctor_user_id: int | None = None,
        status: AppointmentStatus | None = None,
        from_date: date | None = None,
    ) -> list[Appointment]:
        """Find appointments matching all given filters, newest first."""
        query = select(AppointmentModel)

        if patient_id is not None:
            query = query.where(AppointmentModel.patient_id == patient_id)

        if doctor_user_id is not None:
            query = query.join(DoctorModel, AppointmentModel.doctor_id == DoctorModel.id).where(
                DoctorModel.user_id == doctor_user_id
            )

        if status is not None:
            query = query.where(AppointmentModel.status == status)

        if from_date is not None:
            query = query.where(AppointmentModel.appointment_date >= from_date)

        query = query.order_by(
            AppointmentModel.appointment_date.desc(),
            AppointmentModel.appointment_time.desc(),
        )

        result = await self.session.execute(query)
        models = result.unique().scalars().all()
        return [self._to_entity(m) for m in models]

    async def save(self, appointment: Appointment) -> Appointment:
        """Save or update appointment."""
        if appointment.id:
            result = await self.session.execute(
                select(AppointmentModel).where(AppointmentModel.id == appointment.id)
            )
            model = result.scalar_one_or_none()
            if model:
                appointment.increment_version()
                self._update_model(model, appointment)
                try:
                    await self.session.flush()
                except StaleDataError as e:
                    raise InvalidStateException(
                        operation="save",
                        current_state="stale",
                        message=f"Appointment {appointment.id} was modified concurrently",
                    ) from e
                return appointment

        model = self._to_model(appointment)
        self.session.add(model)
        await self.session.flush()

        appointment.id = model.id  # type: ignore[assignment]
        logger.debug(f"Appointment {appointment.id} inserted for slot {appointment.slot_id}")
        return appointment

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        doctor = model.doctor
        return Appointment(
            id=model.id,  # type: ignore[arg-type]
            patient_id=model.patient_id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            doctor_user_id=doctor.user_id if doctor else 0,  # type: ignore[arg-type]
            doctor_name=f"Dr. {doctor.first_name} {doctor.last_name}".strip() if doctor else "",
            slot_id=model.slot_id,  # type: ignore[arg-type]
            appointment_date=model.appointment_date,  # type: ignore[arg-type]
            appointment_time=model.appointment_time,  # type: ignore[arg-type]
            duration_minutes=model.duration_minutes or 30,  # type: ignore[arg-type]
            consultation_mode=ConsultationMode(model.consultation_mode),
            status=model.status,  # type: ignore[arg-type]
            reason=model.reason_for_visit,  # type: ignore[arg-type]
            notes=model.notes,  # type: ignore[arg-type]
            prescription=model.prescription,  # type: ignore[arg-type]
            consultation_fee=model.consultation_fee,  # type: ignore[arg-type]
            payment_status=model.payment_status,  # type: ignore[arg-type]
            confirmed_at=model.confirmed_at,  # type: ignore[arg-type]
            completed_at=model.completed_at,  # type: ignore[arg-type]
            cancelled_at=model.cancelled_at,  # type: ignore[arg-type]
            cancelled_by=Role(model.cancelled_by) if model.cancelled_by else None,
            version=model.version or 0,  # type: ignore[arg-type]
            created_at=model.created_at,  # type: ignore[arg-type]
            updated_at=model.updated_at,  # type: ignore[arg-type]
        )

    def _to_model(self, entity: Appointment) -> AppointmentModel:
        """Convert entity to model."""
        return AppointmentModel(
            patient_id=entity.patient_id,
            doctor_id=entity.doctor_id,
            slot_id=entity.slot_id,
            appointment_date=entity.appointment_date,
            appointment_time=entity.appointment_time,
            duration_minutes=entity.duration_minutes,
            consultation_mode=entity.consultation_mode.value,
            status=entity.status,
            reason_for_visit=entity.reason,
            notes=entity.notes,
            prescription=entity.prescription,
            consultation_fee=entity.consultation_fee,
            payment_status=entity.payment_status,
            confirmed_at=entity.confirmed_at,
            completed_at=entity.completed_at,
            cancelled_at=entity.cancelled_at,
            cancelled_by=entity.cancelled_by.value if entity.cancelled_by else None,
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _update_model(self, model: AppointmentModel, entity: Appointment) -> None:
        """Update the mutable columns of a model from an entity."""
        model.status = entity.status  # type: ignore[assignment]
        model.notes = entity.notes  # type: ignore[assignment]
        model.prescription = entity.prescription  # type: ignore[assignment]
        model.payment_status = entity.payment_status  # type: ignore[assignment]
        model.confirmed_at = entity.confirmed_at  # type: ignore[assignment]
        model.completed_at = entity.completed_at  # type: ignore[assignment]
        model.cancelled_at = entity.cancelled_at  # type: ignore[assignment]
        model.cancelled_by = entity.cancelled_by.value if entity.cancelled_by else None  # type: ignore[assignment]
        model.version = entity.version  # type: ignore[assignment]
        model.updated_at = entity.updated_at  # type: ignore[assignment]
