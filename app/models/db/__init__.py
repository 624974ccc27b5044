"""
Database models package
"""

from .base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
