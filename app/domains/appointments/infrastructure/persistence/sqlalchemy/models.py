"""
Appointments SQLAlchemy Models

Database models for appointments domain persistence.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentStatus,
    NotificationType,
    PaymentStatus,
)
from app.models.db.base import Base, TimestampMixin


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class DoctorModel(Base, TimestampMixin):
    """SQLAlchemy model for Doctor entity."""

    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, unique=True, index=True)

    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    specialization = Column(String(100), nullable=True)

    # Booking attributes
    consultation_modes = Column(JSON, nullable=False, default=lambda: ["ONLINE", "OFFLINE"])
    consultation_fee = Column(Numeric(10, 2), nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    time_slots = relationship("TimeSlotModel", back_populates="doctor")


class TimeSlotModel(Base, TimestampMixin):
    """SQLAlchemy model for TimeSlot entity."""

    __tablename__ = "doctor_time_slots"
    __table_args__ = (
        UniqueConstraint("doctor_id", "slot_date", "slot_time", name="uq_doctor_time_slots_key"),
        Index("ix_doctor_time_slots_free", "doctor_id", "slot_date", "is_booked"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False)

    slot_date = Column(Date, nullable=False)
    slot_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=30)
    consultation_mode = Column(String(10), nullable=True)  # ONLINE, OFFLINE or both when NULL
    is_booked = Column(Boolean, nullable=False, default=False)

    doctor = relationship("DoctorModel", back_populates="time_slots")


class AppointmentModel(Base, TimestampMixin):
    """SQLAlchemy model for Appointment entity."""

    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_date_time", "appointment_date", "appointment_time"),)

    id = Column(Integer, primary_key=True, index=True)

    # References
    patient_id = Column(Integer, nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    slot_id = Column(Integer, ForeignKey("doctor_time_slots.id"), nullable=True)

    # Scheduling
    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=30)
    consultation_mode = Column(String(10), nullable=False)

    # Status
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status", values_callable=_enum_values),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
        index=True,
    )

    # Clinical information
    reason_for_visit = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    prescription = Column(Text, nullable=True)

    # Billing
    consultation_fee = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(
        SQLEnum(PaymentStatus, name="payment_status", values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False,
    )

    # Timestamps
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    cancelled_by = Column(String(20), nullable=True)  # patient, doctor, admin
    version = Column(Integer, nullable=False, default=0)

    # UPDATE ... WHERE version = <loaded>; the entity sets the next value
    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    doctor = relationship("DoctorModel", lazy="joined")


class NotificationModel(Base):
    """SQLAlchemy model for persisted notifications."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    type = Column(
        SQLEnum(NotificationType, name="notification_type", values_callable=_enum_values),
        nullable=False,
    )
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
