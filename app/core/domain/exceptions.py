"""
Domain Exceptions for Domain-Driven Design

These exceptions represent business rule violations and domain-specific errors.
They should be caught and translated to appropriate HTTP responses in the API layer.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "SLOT_CONFLICT")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for malformed input: bad times, unknown modes, past dates, etc.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class SlotConflictException(DomainException):
    """Raised when a time slot is already booked or does not exist."""

    def __init__(
        self,
        doctor_id: int | None = None,
        time_slot: str | None = None,
        message: str | None = None,
    ):
        self.doctor_id = doctor_id
        self.time_slot = time_slot
        msg = message or "Selected time slot is not available"
        details: dict[str, Any] = {}
        if doctor_id:
            details["doctor_id"] = doctor_id
        if time_slot:
            details["time_slot"] = time_slot
        super().__init__(msg, "SLOT_CONFLICT", details)


class DoctorNotAvailableException(DomainException):
    """Raised when a doctor is unknown, unavailable or does not offer the requested mode."""

    def __init__(self, doctor_id: int, reason: str, message: str | None = None):
        self.doctor_id = doctor_id
        self.reason = reason
        msg = message or f"Doctor {doctor_id} is not available: {reason}"
        super().__init__(
            msg,
            "DOCTOR_NOT_AVAILABLE",
            {"doctor_id": doctor_id, "reason": reason},
        )


class InvalidStateException(DomainException):
    """Raised when a status transition is not valid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        self.operation = operation
        self.current_state = current_state
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(
            msg,
            "INVALID_STATE",
            {"operation": operation, "current_state": current_state},
        )


class AuthorizationException(DomainException):
    """Raised when a principal is not authorized to perform an operation."""

    def __init__(self, operation: str, resource: str | None = None, user_id: int | None = None):
        self.operation = operation
        self.resource = resource
        self.user_id = user_id
        msg = f"Not authorized to perform '{operation}'"
        if resource:
            msg += f" on '{resource}'"
        super().__init__(
            msg,
            "FORBIDDEN",
            {
                "operation": operation,
                "resource": resource,
            },
        )


class AuthenticationException(DomainException):
    """Raised when a credential cannot be verified."""

    def __init__(self, message: str = "Invalid or expired credential"):
        super().__init__(message, "UNAUTHORIZED")


class DuplicateEntityException(DomainException):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(
            f"{entity_type} with {field}='{value}' already exists",
            "DUPLICATE_ENTITY",
            {
                "entity_type": entity_type,
                "field": field,
                "value": str(value),
            },
        )


class InternalException(DomainException):
    """
    Raised when an unexpected failure aborts an atomic unit.

    The unit of work has already been rolled back when this is raised.
    """

    def __init__(self, operation: str, original_error: Exception | None = None):
        self.operation = operation
        self.original_error = original_error
        details: dict[str, Any] = {"operation": operation}
        if original_error:
            details["original_error"] = type(original_error).__name__
        super().__init__(f"Failed to {operation}", "INTERNAL_ERROR", details)
