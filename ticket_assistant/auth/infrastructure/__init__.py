"""
Auth Infrastructure Layer
=========================

Contains:
- Models: SQLAlchemy ORM model for users
- Repositories: Data access implementation
- Security: Password hashing (passlib) and JWT session tokens
"""

from ticket_assistant.auth.infrastructure.models import UserModel
from ticket_assistant.auth.infrastructure.repositories import SQLAlchemyUserRepository
from ticket_assistant.auth.infrastructure.security import (
    PasslibPasswordHasher,
    JWTTokenCodec,
)

__all__ = [
    "UserModel",
    "SQLAlchemyUserRepository",
    "PasslibPasswordHasher",
    "JWTTokenCodec",
]
