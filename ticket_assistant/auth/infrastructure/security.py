"""
Auth Security Adapters
======================

Password hashing with passlib (argon2) and HS256 session tokens with PyJWT.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from ticket_assistant.auth.application import IPasswordHasher, ITokenCodec
from ticket_assistant.auth.domain import User
from ticket_assistant.config import settings
from ticket_assistant.core import AuthenticationException


class PasslibPasswordHasher(IPasswordHasher):
    """Argon2 password hashing via passlib's CryptContext."""

    def __init__(self, context: Optional[CryptContext] = None):
        self._context = context or CryptContext(schemes=["argon2"], deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognised hash format
            return False


class JWTTokenCodec(ITokenCodec):
    """
    Signs session tokens carrying identity, role and skills.

    Claims: sub, email, role, skills, iat, exp.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None
    ):
        self._secret = secret or settings.jwt_secret
        self._algorithm = algorithm or settings.jwt_algorithm
        self._expire_minutes = expire_minutes or settings.access_token_expire_minutes

    def encode(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user.id,
            "email": user.email,
            "role": user.role.value,
            "skills": list(user.skills),
            "iat": now,
            "exp": now + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationException("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationException("Invalid token")
