from fastapi import APIRouter

from app.domains.appointments.api import router as appointments_router

api_router = APIRouter()

# API routes (all have /api/v1 prefix from app_factory)
api_router.include_router(appointments_router)
