"""
Base Entity Classes for Domain-Driven Design

Entities are domain objects with identity and lifecycle.
They maintain their identity regardless of their attributes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

# Type variable for entity ID (int, str, UUID, etc.)
TId = TypeVar("TId")


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for all domain entities.

    An entity is a domain object that has a distinct identity
    that runs through time and different states.

    Type Parameters:
        TId: Type of entity identifier (int, str, UUID)

    Example:
        ```python
        @dataclass
        class TimeSlot(Entity[int]):
            doctor_id: int = 0
            is_booked: bool = False

            def book(self) -> None:
                self.is_booked = True
                self.touch()
        ```
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID."""
        if not isinstance(other, Entity):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id) if self.id is not None else id(self)

    def is_new(self) -> bool:
        """Check if entity is new (not yet persisted)."""
        return self.id is None

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(UTC)


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Base class for aggregate roots.

    An aggregate root is the entry point to an aggregate.
    It controls access to all members of the aggregate
    and ensures invariants are maintained.

    Repositories bump the version on every persisted change.
    """

    version: int = field(default=0, compare=False)

    def increment_version(self) -> None:
        """Increment aggregate version."""
        self.version += 1
