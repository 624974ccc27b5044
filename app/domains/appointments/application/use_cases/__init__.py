"""
Appointments Domain Use Cases

Application layer use cases for the appointments domain.
"""

from app.domains.appointments.application.use_cases.book_appointment import (
    BookAppointmentRequest,
    BookAppointmentResponse,
    BookAppointmentUseCase,
)
from app.domains.appointments.application.use_cases.cancel_appointment import (
    CancelAppointmentRequest,
    CancelAppointmentResponse,
    CancelAppointmentUseCase,
)
from app.domains.appointments.application.use_cases.get_appointments import (
    GetAppointmentRequest,
    GetAppointmentResponse,
    GetAppointmentUseCase,
    ListAppointmentsRequest,
    ListAppointmentsResponse,
    ListAppointmentsUseCase,
)
from app.domains.appointments.application.use_cases.list_free_slots import (
    ListFreeSlotsRequest,
    ListFreeSlotsResponse,
    ListFreeSlotsUseCase,
)
from app.domains.appointments.application.use_cases.update_appointment_status import (
    UpdateAppointmentStatusRequest,
    UpdateAppointmentStatusResponse,
    UpdateAppointmentStatusUseCase,
)

__all__ = [
    # Book Appointment
    "BookAppointmentUseCase",
    "BookAppointmentRequest",
    "BookAppointmentResponse",
    # List / Get
    "ListAppointmentsUseCase",
    "ListAppointmentsRequest",
    "ListAppointmentsResponse",
    "GetAppointmentUseCase",
    "GetAppointmentRequest",
    "GetAppointmentResponse",
    # Update Status
    "UpdateAppointmentStatusUseCase",
    "UpdateAppointmentStatusRequest",
    "UpdateAppointmentStatusResponse",
    # Cancel
    "CancelAppointmentUseCase",
    "CancelAppointmentRequest",
    "CancelAppointmentResponse",
    # Slots
    "ListFreeSlotsUseCase",
    "ListFreeSlotsRequest",
    "ListFreeSlotsResponse",
]
