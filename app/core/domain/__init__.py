"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from app.core.domain.entities import (
    AggregateRoot,
    Entity,
)
from app.core.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DoctorNotAvailableException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InternalException,
    InvalidStateException,
    SlotConflictException,
    ValidationException,
)
from app.core.domain.value_objects import (
    StatusEnum,
    ValueObject,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "SlotConflictException",
    "DoctorNotAvailableException",
    "InvalidStateException",
    "AuthorizationException",
    "AuthenticationException",
    "DuplicateEntityException",
    "InternalException",
]
