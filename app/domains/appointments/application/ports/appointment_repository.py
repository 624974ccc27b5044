"""
Appointment Repository Port

Interface for appointment data access following Clean Architecture.
"""

from datetime import date
from typing import Protocol, runtime_checkable

from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus


@runtime_checkable
class IAppointmentRepository(Protocol):
    """
    Appointment repository interface.

    Appointments are never deleted; cancellation is a status.

    Example:
        ```python
        class SQLAlchemyAppointmentRepository(IAppointmentRepository):
            async def find_by_id(self, appointment_id: int) -> Appointment | None:
                # SQLAlchemy implementation
                pass
        ```
    """

    async def find_by_id(self, appointment_id: int, for_update: bool = False) -> Appointment | None:
        """
        Find appointment by ID.

        Args:
            appointment_id: Unique appointment identifier
            for_update: Hold the appointment against concurrent writers until
                the unit of work ends

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def find_many(
        self,
        patient_id: int | None = None,
        doctor_user_id: int | None = None,
        status: AppointmentStatus | None = None,
        from_date: date | None = None,
    ) -> list[Appointment]:
        """
        Find appointments matching all given filters.

        Args:
            patient_id: Only appointments of this patient
            doctor_user_id: Only appointments of the doctor owned by this user
            status: Only appointments in this status
            from_date: Only appointments on or after this date

        Returns:
            Appointments ordered by date then time, newest first
        """
        ...

    async def save(self, appointment: Appointment) -> Appointment:
        """
        Save appointment (create or update).

        Args:
            appointment: Appointment entity to save

        Returns:
            Saved appointment with ID
        """
        ...
