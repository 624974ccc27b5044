"""
Appointments API Layer

FastAPI routes, schemas and dependencies for the appointments domain.
"""

from app.domains.appointments.api.routes import router

__all__ = ["router"]
