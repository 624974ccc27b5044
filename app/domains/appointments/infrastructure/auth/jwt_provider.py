"""
JWT Auth Provider

Verifies bearer tokens and turns their claims into a Principal.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.domain import AuthenticationException
from app.domains.appointments.application.ports.collaborators import IAuthProvider
from app.domains.appointments.domain.value_objects.appointment_status import Principal, Role

logger = logging.getLogger(__name__)


class JWTAuthProvider(IAuthProvider):
    """
    Auth provider backed by signed JWTs.

    Expected claims: `sub` (user id), `role` (patient | doctor | admin),
    optional `email` and `name`.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", access_token_expire_minutes: int = 60):
        self.SECRET_KEY = secret_key
        self.ALGORITHM = algorithm
        self.ACCESS_TOKEN_EXPIRE_MINUTES = access_token_expire_minutes

    def create_access_token(
        self,
        user_id: int,
        role: Role,
        expires_delta: timedelta | None = None,
        **extra_claims: Any,
    ) -> str:
        """
        Crea un token JWT de acceso

        Args:
            user_id: Usuario autenticado
            role: Rol del usuario
            expires_delta: Tiempo de expiración (opcional)

        Returns:
            Token JWT codificado
        """
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode = {
            **extra_claims,
            "sub": str(user_id),
            "role": role.value,
            "exp": expire,
            "iat": datetime.now(timezone.utc),
            "token_type": "access",
        }
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decodifica un token JWT"""
        try:
            return jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
        except ExpiredSignatureError as e:
            raise AuthenticationException("Token has expired") from e
        except JWTError as e:
            logger.debug(f"Invalid token: {e}")
            raise AuthenticationException("Could not validate credentials") from e

    async def verify(self, credential: str) -> Principal:
        payload = self.decode_token(credential)

        subject = payload.get("sub")
        role = payload.get("role")
        if subject is None or role is None:
            raise AuthenticationException("Token is missing required claims")

        try:
            return Principal(
                user_id=int(subject),
                role=Role.from_string(role),
                email=payload.get("email"),
                name=payload.get("name"),
            )
        except ValueError as e:
            raise AuthenticationException("Token claims are invalid") from e
