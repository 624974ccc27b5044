"""
Notification Composer

Builds the notification records emitted by booking, status updates and cancellations.
"""

from ..entities.appointment import Appointment
from ..entities.notification import Notification
from ..value_objects.appointment_status import AppointmentStatus, NotificationType, Role

STATUS_UPDATE_MESSAGES: dict[AppointmentStatus, str] = {
    AppointmentStatus.CONFIRMED: "Your appointment has been confirmed by the doctor.",
    AppointmentStatus.COMPLETED: "Your consultation has been marked as completed.",
    AppointmentStatus.CANCELLED: "Your appointment has been cancelled by the doctor.",
    AppointmentStatus.NO_SHOW: "You missed your appointment.",
}


class NotificationComposer:
    """Composes immutable Notification values for appointment events."""

    @staticmethod
    def _when(appointment: Appointment) -> str:
        if appointment.appointment_date is None or appointment.appointment_time is None:
            return ""
        return f"{appointment.appointment_date.strftime('%d/%m/%Y')} at {appointment.appointment_time.strftime('%H:%M')}"

    def booking(self, appointment: Appointment, patient_name: str | None = None) -> list[Notification]:
        """Confirmation to the patient and new-appointment alert to the doctor."""
        when = self._when(appointment)
        patient_label = patient_name or f"patient #{appointment.patient_id}"
        return [
            Notification(
                recipient_id=appointment.patient_id,
                type=NotificationType.CONFIRMATION,
                title="Appointment booked",
                message=f"Your appointment with {appointment.doctor_name or 'your doctor'} on {when} has been booked.",
                related_appointment_id=appointment.id,
            ),
            Notification(
                recipient_id=appointment.doctor_user_id,
                type=NotificationType.NEW_APPOINTMENT,
                title="New appointment",
                message=f"You have a new appointment with {patient_label} on {when}.",
                related_appointment_id=appointment.id,
            ),
        ]

    def status_update(self, appointment: Appointment) -> Notification:
        """Status-specific notice to the patient."""
        return Notification(
            recipient_id=appointment.patient_id,
            type=NotificationType.STATUS_UPDATE,
            title="Appointment update",
            message=STATUS_UPDATE_MESSAGES.get(
                appointment.status,
                f"Your appointment status is now {appointment.status.value}.",
            ),
            related_appointment_id=appointment.id,
        )

    def cancellation(self, appointment: Appointment, cancelled_by: Role) -> list[Notification]:
        """
        Cancellation notice to the non-initiating party.

        A patient cancellation notifies the doctor, a doctor cancellation the
        patient, and an admin cancellation both of them.
        """
        when = self._when(appointment)
        to_doctor = Notification(
            recipient_id=appointment.doctor_user_id,
            type=NotificationType.CANCELLATION,
            title="Appointment cancelled",
            message=f"A patient cancelled the appointment on {when}.",
            related_appointment_id=appointment.id,
        )
        to_patient = Notification(
            recipient_id=appointment.patient_id,
            type=NotificationType.CANCELLATION,
            title="Appointment cancelled",
            message=f"Your appointment on {when} has been cancelled by the doctor.",
            related_appointment_id=appointment.id,
        )

        match cancelled_by:
            case Role.PATIENT:
                return [to_doctor]
            case Role.DOCTOR:
                return [to_patient]
            case _:
                return [
                    Notification(
                        recipient_id=appointment.patient_id,
                        type=NotificationType.CANCELLATION,
                        title="Appointment cancelled",
                        message=f"Your appointment on {when} has been cancelled by an administrator.",
                        related_appointment_id=appointment.id,
                    ),
                    Notification(
                        recipient_id=appointment.doctor_user_id,
                        type=NotificationType.CANCELLATION,
                        title="Appointment cancelled",
                        message=f"The appointment on {when} has been cancelled by an administrator.",
                        related_appointment_id=appointment.id,
                    ),
                ]
