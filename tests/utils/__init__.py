"""Test utilities and helpers."""

from tests.utils.assertions import assert_slots_consistent
from tests.utils.factories import (
    ADMIN_ID,
    DOCTOR_USER_ID,
    OTHER_DOCTOR_USER_ID,
    OTHER_PATIENT_ID,
    PATIENT_ID,
    create_mock_appointment_model,
    create_mock_doctor_model,
    create_mock_slot_model,
    save_doctor,
)

__all__ = [
    "ADMIN_ID",
    "DOCTOR_USER_ID",
    "OTHER_DOCTOR_USER_ID",
    "OTHER_PATIENT_ID",
    "PATIENT_ID",
    "assert_slots_consistent",
    "create_mock_appointment_model",
    "create_mock_doctor_model",
    "create_mock_slot_model",
    "save_doctor",
]
