from app.domains.appointments.infrastructure.auth.jwt_provider import JWTAuthProvider

__all__ = ["JWTAuthProvider"]
