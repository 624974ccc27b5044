"""
Appointments API Routes

FastAPI router for appointment booking and lifecycle endpoints.
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.core.domain import AuthorizationException, ValidationException
from app.domains.appointments.api.dependencies import (
    CurrentPrincipal,
    get_book_appointment_use_case,
    get_cancel_appointment_use_case,
    get_get_appointment_use_case,
    get_list_appointments_use_case,
    get_list_free_slots_use_case,
    get_update_status_use_case,
)
from app.domains.appointments.api.schemas import (
    AppointmentListResponse,
    AppointmentResponse,
    BookAppointmentBody,
    FreeSlotsResponse,
    StatusUpdateResponse,
    TimeSlotResponse,
    UpdateStatusBody,
)
from app.domains.appointments.application.use_cases import (
    BookAppointmentRequest,
    BookAppointmentUseCase,
    CancelAppointmentRequest,
    CancelAppointmentUseCase,
    GetAppointmentRequest,
    GetAppointmentUseCase,
    ListAppointmentsRequest,
    ListAppointmentsUseCase,
    ListFreeSlotsRequest,
    ListFreeSlotsUseCase,
    UpdateAppointmentStatusRequest,
    UpdateAppointmentStatusUseCase,
)
from app.domains.appointments.domain.value_objects import AppointmentStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Appointments"])

# Type aliases for use case dependencies
BookAppointmentUseCaseDep = Annotated[BookAppointmentUseCase, Depends(get_book_appointment_use_case)]
ListAppointmentsUseCaseDep = Annotated[ListAppointmentsUseCase, Depends(get_list_appointments_use_case)]
GetAppointmentUseCaseDep = Annotated[GetAppointmentUseCase, Depends(get_get_appointment_use_case)]
UpdateStatusUseCaseDep = Annotated[UpdateAppointmentStatusUseCase, Depends(get_update_status_use_case)]
CancelAppointmentUseCaseDep = Annotated[CancelAppointmentUseCase, Depends(get_cancel_appointment_use_case)]
ListFreeSlotsUseCaseDep = Annotated[ListFreeSlotsUseCase, Depends(get_list_free_slots_use_case)]


@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentBody,
    principal: CurrentPrincipal,
    use_case: BookAppointmentUseCaseDep,
):
    """Book a free slot for the authenticated patient."""
    if not principal.is_patient:
        raise AuthorizationException(operation="book", resource="appointment", user_id=principal.user_id)

    result = await use_case.execute(
        BookAppointmentRequest(
            patient_id=principal.user_id,
            doctor_id=body.doctor_id,
            appointment_date=body.appointment_date,
            appointment_time=body.appointment_time,
            consultation_mode=body.consultation_mode,
            reason=body.reason,
            patient_name=principal.name,
        )
    )
    return AppointmentResponse.model_validate(result.appointment)


@router.get("/appointments", response_model=AppointmentListResponse)
async def list_appointments(
    principal: CurrentPrincipal,
    use_case: ListAppointmentsUseCaseDep,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    upcoming: bool = False,
):
    """List the caller's appointments, newest first."""
    appointment_status = None
    if status_filter:
        try:
            appointment_status = AppointmentStatus.from_string(status_filter)
        except ValueError as e:
            raise ValidationException(f"Invalid status: {status_filter}", field="status") from e

    result = await use_case.execute(
        ListAppointmentsRequest(principal=principal, status=appointment_status, upcoming_only=upcoming)
    )
    return AppointmentListResponse(
        appointments=[AppointmentResponse.model_validate(a) for a in result.appointments],
        total=result.total,
    )


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    principal: CurrentPrincipal,
    use_case: GetAppointmentUseCaseDep,
):
    """Get one appointment the caller is allowed to see."""
    result = await use_case.execute(GetAppointmentRequest(principal=principal, appointment_id=appointment_id))
    return AppointmentResponse.model_validate(result.appointment)


@router.put("/appointments/{appointment_id}/status", response_model=StatusUpdateResponse)
async def update_appointment_status(
    appointment_id: int,
    body: UpdateStatusBody,
    principal: CurrentPrincipal,
    use_case: UpdateStatusUseCaseDep,
):
    """Move an appointment to a new status."""
    result = await use_case.execute(
        UpdateAppointmentStatusRequest(
            principal=principal,
            appointment_id=appointment_id,
            new_status=AppointmentStatus(body.status),
            notes=body.notes,
            prescription=body.prescription,
        )
    )
    return StatusUpdateResponse(
        appointment=AppointmentResponse.model_validate(result.appointment),
        previous_status=result.previous_status.value,
    )


@router.delete("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    principal: CurrentPrincipal,
    use_case: CancelAppointmentUseCaseDep,
):
    """Cancel an appointment and release its slot."""
    result = await use_case.execute(CancelAppointmentRequest(principal=principal, appointment_id=appointment_id))
    return AppointmentResponse.model_validate(result.appointment)


@router.get("/doctors/{doctor_id}/slots", response_model=FreeSlotsResponse)
async def list_free_slots(
    doctor_id: int,
    use_case: ListFreeSlotsUseCaseDep,
    date_from: date,
    date_to: date | None = None,
):
    """List free slots of a doctor between two dates (inclusive)."""
    result = await use_case.execute(
        ListFreeSlotsRequest(doctor_id=doctor_id, date_from=date_from, date_to=date_to)
    )
    slots = [TimeSlotResponse.model_validate(slot) for slot in result.slots]
    return FreeSlotsResponse(doctor_id=result.doctor_id, slots=slots, total=len(slots))


__all__ = ["router"]
