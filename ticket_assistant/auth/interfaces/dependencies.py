"""
Auth Dependencies
=================

FastAPI dependencies that resolve the caller and enforce roles.
"""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.application import AuthService
from ticket_assistant.auth.domain import User
from ticket_assistant.auth.infrastructure import (
    JWTTokenCodec,
    PasslibPasswordHasher,
    SQLAlchemyUserRepository,
)
from ticket_assistant.config import UserRole, settings
from ticket_assistant.core import AuthenticationException, AuthorizationException
from ticket_assistant.infrastructure.database import get_session

bearer_scheme = HTTPBearer(auto_error=False)

_password_hasher = PasslibPasswordHasher()


def build_auth_service(session: AsyncSession) -> AuthService:
    """Wire an AuthService onto a database session."""
    return AuthService(
        SQLAlchemyUserRepository(session),
        _password_hasher,
        JWTTokenCodec(),
        allowed_signup_roles=settings.signup_allowed_roles
    )


async def get_auth_service(
    session: AsyncSession = Depends(get_session)
) -> AuthService:
    return build_auth_service(session)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: AuthService = Depends(get_auth_service)
) -> User:
    """Resolve the bearer token into a User or answer 401."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationException("Authentication required")
    return await service.authenticate(credentials.credentials)


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that only lets the given roles through.

    Usage:
        @router.get("/users")
        async def list_users(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...
    """
    allowed = ", ".join(role.value for role in roles)

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(*roles):
            raise AuthorizationException(
                f"Requires role: {allowed}",
                {"role": user.role.value}
            )
        return user

    return dependency
