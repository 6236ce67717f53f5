"""
Auth Application Layer
======================

Contains:
- Services: signup/login/token resolution and admin user management
- DTOs: request/response models for the auth API
"""

from ticket_assistant.auth.application.dto import (
    SignupRequest,
    LoginRequest,
    UpdateUserRequest,
    UserResponse,
    UserSummary,
    AuthResponse,
    UpdateUserResponse,
)
from ticket_assistant.auth.application.services import (
    AuthService,
    IUserRepository,
    IPasswordHasher,
    ITokenCodec,
)

__all__ = [
    # DTOs
    "SignupRequest",
    "LoginRequest",
    "UpdateUserRequest",
    "UserResponse",
    "UserSummary",
    "AuthResponse",
    "UpdateUserResponse",
    # Services
    "AuthService",
    # Interfaces
    "IUserRepository",
    "IPasswordHasher",
    "ITokenCodec",
]
