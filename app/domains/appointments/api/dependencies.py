"""
Appointments API Dependencies

FastAPI dependencies for the appointments domain.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.container import DependencyContainer, get_container
from app.core.domain import AuthenticationException
from app.domains.appointments.application.use_cases import (
    BookAppointmentUseCase,
    CancelAppointmentUseCase,
    GetAppointmentUseCase,
    ListAppointmentsUseCase,
    ListFreeSlotsUseCase,
    UpdateAppointmentStatusUseCase,
)
from app.domains.appointments.domain.value_objects import Principal

# auto_error=False so a missing header goes through the AuthenticationException handler
security = HTTPBearer(auto_error=False)

ContainerDep = Annotated[DependencyContainer, Depends(get_container)]


async def get_current_principal(
    container: ContainerDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """Resolve the bearer token into the authenticated Principal."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Authentication required")
    return await container.get_auth_provider().verify(credentials.credentials)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def get_book_appointment_use_case(container: ContainerDep) -> BookAppointmentUseCase:
    """Get BookAppointmentUseCase instance."""
    return container.create_book_appointment_use_case()


def get_list_appointments_use_case(container: ContainerDep) -> ListAppointmentsUseCase:
    """Get ListAppointmentsUseCase instance."""
    return container.create_list_appointments_use_case()


def get_get_appointment_use_case(container: ContainerDep) -> GetAppointmentUseCase:
    """Get GetAppointmentUseCase instance."""
    return container.create_get_appointment_use_case()


def get_update_status_use_case(container: ContainerDep) -> UpdateAppointmentStatusUseCase:
    """Get UpdateAppointmentStatusUseCase instance."""
    return container.create_update_appointment_status_use_case()


def get_cancel_appointment_use_case(container: ContainerDep) -> CancelAppointmentUseCase:
    """Get CancelAppointmentUseCase instance."""
    return container.create_cancel_appointment_use_case()


def get_list_free_slots_use_case(container: ContainerDep) -> ListFreeSlotsUseCase:
    """Get ListFreeSlotsUseCase instance."""
    return container.create_list_free_slots_use_case()


__all__ = [
    "CurrentPrincipal",
    "get_current_principal",
    "get_book_appointment_use_case",
    "get_list_appointments_use_case",
    "get_get_appointment_use_case",
    "get_update_status_use_case",
    "get_cancel_appointment_use_case",
    "get_list_free_slots_use_case",
]
