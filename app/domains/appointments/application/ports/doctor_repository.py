"""
Doctor Repository Port

Interface for doctor data access following Clean Architecture.
"""

from typing import Protocol, runtime_checkable

from app.domains.appointments.domain.entities.doctor import Doctor


@runtime_checkable
class IDoctorRepository(Protocol):
    """Doctor repository interface."""

    async def find_by_id(self, doctor_id: int) -> Doctor | None:
        """
        Find doctor by ID.

        Args:
            doctor_id: Doctor ID

        Returns:
            Doctor if found, None otherwise
        """
        ...

    async def save(self, doctor: Doctor) -> Doctor:
        """
        Save doctor (create or update).

        Args:
            doctor: Doctor entity to save

        Returns:
            Saved doctor with ID
        """
        ...
