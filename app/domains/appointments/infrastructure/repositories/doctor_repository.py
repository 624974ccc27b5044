"""
Doctor Repository Implementation

SQLAlchemy implementation of IDoctorRepository.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.appointments.application.ports.doctor_repository import IDoctorRepository
from app.domains.appointments.domain.entities.doctor import Doctor
from app.domains.appointments.domain.value_objects.appointment_status import ConsultationMode
from app.domains.appointments.infrastructure.persistence.sqlalchemy.models import DoctorModel

logger = logging.getLogger(__name__)


class SQLAlchemyDoctorRepository(IDoctorRepository):
    """SQLAlchemy implementation of doctor repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, doctor_id: int) -> Doctor | None:
        """Find doctor by ID."""
        result = await self.session.execute(select(DoctorModel).where(DoctorModel.id == doctor_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, doctor: Doctor) -> Doctor:
        """Save or update doctor."""
        if doctor.id:
            result = await self.session.execute(select(DoctorModel).where(DoctorModel.id == doctor.id))
            model = result.scalar_one_or_none()
            if model:
                self._update_model(model, doctor)
                await self.session.flush()
                return doctor

        model = self._to_model(doctor)
        self.session.add(model)
        await self.session.flush()
        doctor.id = model.id  # type: ignore[assignment]
        return doctor

    def _to_entity(self, model: DoctorModel) -> Doctor:
        """Convert model to entity."""
        return Doctor(
            id=model.id,  # type: ignore[arg-type]
            user_id=model.user_id,  # type: ignore[arg-type]
            first_name=model.first_name or "",  # type: ignore[arg-type]
            last_name=model.last_name or "",  # type: ignore[arg-type]
            specialization=model.specialization,  # type: ignore[arg-type]
            consultation_modes={ConsultationMode(m) for m in (model.consultation_modes or [])},
            consultation_fee=Decimal(model.consultation_fee or 0),
            is_available=bool(model.is_available),
            created_at=model.created_at,  # type: ignore[arg-type]
            updated_at=model.updated_at,  # type: ignore[arg-type]
        )

    def _to_model(self, entity: Doctor) -> DoctorModel:
        """Convert entity to model."""
        return DoctorModel(
            user_id=entity.user_id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            specialization=entity.specialization,
            consultation_modes=sorted(m.value for m in entity.consultation_modes),
            consultation_fee=entity.consultation_fee,
            is_available=entity.is_available,
        )

    def _update_model(self, model: DoctorModel, entity: Doctor) -> None:
        model.first_name = entity.first_name  # type: ignore[assignment]
        model.last_name = entity.last_name  # type: ignore[assignment]
        model.specialization = entity.specialization  # type: ignore[assignment]
        model.consultation_modes = sorted(m.value for m in entity.consultation_modes)  # type: ignore[assignment]
        model.consultation_fee = entity.consultation_fee  # type: ignore[assignment]
        model.is_available = entity.is_available  # type: ignore[assignment]
