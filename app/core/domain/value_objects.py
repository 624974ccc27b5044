"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity

    Example:
        ```python
        @dataclass(frozen=True)
        class SlotKey(ValueObject):
            doctor_id: int
            slot_date: date
            slot_time: time

            def _validate(self) -> None:
                if self.doctor_id <= 0:
                    raise ValueError("Doctor ID must be positive")
        ```
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")
