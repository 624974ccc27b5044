"""
Appointments API Schemas

Pydantic schemas for API request/response validation.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from app.domains.appointments.domain.value_objects import ConsultationMode


def _parse_hhmm(value):
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValueError("Time must be a string in HH:MM format")
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError as e:
        raise ValueError("Time must be in HH:MM format") from e


class BookAppointmentBody(BaseModel):
    """Appointment booking request schema."""

    doctor_id: int = Field(..., gt=0, description="Doctor to book")
    appointment_date: date = Field(..., description="Slot date (YYYY-MM-DD)")
    appointment_time: time = Field(..., description="Slot start time (HH:MM)")
    consultation_mode: ConsultationMode = Field(..., description="ONLINE or OFFLINE")
    reason: str | None = Field(None, description="Reason for the visit, length bounded by APPOINTMENT_REASON_MAX_LENGTH")

    @field_validator("appointment_time", mode="before")
    @classmethod
    def validate_appointment_time(cls, v):
        return _parse_hhmm(v)

    @field_validator("consultation_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class UpdateStatusBody(BaseModel):
    """Status update request schema."""

    status: Literal["confirmed", "completed", "cancelled", "no_show"]
    notes: str | None = Field(None, max_length=1000)
    prescription: str | None = Field(None, max_length=1000)


class AppointmentResponse(BaseModel):
    """Appointment response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int
    doctor_name: str
    slot_id: int | None = None
    appointment_date: date
    appointment_time: time
    duration_minutes: int
    consultation_mode: str
    status: str
    reason: str | None = None
    notes: str | None = None
    prescription: str | None = None
    consultation_fee: Decimal
    payment_status: str
    cancelled_by: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("consultation_mode", "status", "payment_status", "cancelled_by", mode="before")
    @classmethod
    def enum_to_value(cls, v):
        return getattr(v, "value", v)

    @field_serializer("appointment_time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")

    @field_serializer("consultation_fee")
    def serialize_fee(self, value: Decimal) -> str:
        return f"{value:.2f}"


class AppointmentListResponse(BaseModel):
    """Appointment list response schema."""

    appointments: list[AppointmentResponse]
    total: int


class StatusUpdateResponse(BaseModel):
    """Status update response schema."""

    appointment: AppointmentResponse
    previous_status: str


class TimeSlotResponse(BaseModel):
    """Free slot response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    slot_date: date
    slot_time: time
    duration_minutes: int
    consultation_mode: str | None = None
    is_booked: bool

    @field_validator("consultation_mode", mode="before")
    @classmethod
    def enum_to_value(cls, v):
        return getattr(v, "value", v)

    @field_serializer("slot_time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class FreeSlotsResponse(BaseModel):
    """Free slots of one doctor."""

    doctor_id: int
    slots: list[TimeSlotResponse]
    total: int


__all__ = [
    "BookAppointmentBody",
    "UpdateStatusBody",
    "AppointmentResponse",
    "AppointmentListResponse",
    "StatusUpdateResponse",
    "TimeSlotResponse",
    "FreeSlotsResponse",
]
