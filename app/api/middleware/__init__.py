"""
Middleware package for FastAPI application.

Contains request logging middleware.
"""

from app.api.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]
