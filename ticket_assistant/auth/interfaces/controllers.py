"""
Auth Controllers (API Routes)
=============================

FastAPI routes for signup, login and admin user management.

Controllers are thin - they delegate to AuthService.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status

from ticket_assistant.auth.application import (
    AuthResponse,
    AuthService,
    LoginRequest,
    SignupRequest,
    UpdateUserRequest,
    UpdateUserResponse,
    UserResponse,
)
from ticket_assistant.auth.domain import User
from ticket_assistant.auth.interfaces.dependencies import get_auth_service, require_roles
from ticket_assistant.config import UserRole
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])


# ========== Example payloads for Swagger ==========

AUTH_RESPONSE_EXAMPLE = {
    "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
    "user": {
        "id": "6f1c2d3e-0000-4000-8000-000000000001",
        "email": "dev@example.com",
        "role": "user",
        "skills": ["React", "Node.js"],
        "createdAt": "2024-01-15T10:00:00Z"
    }
}


# ========== Route Handlers ==========

@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    description="""
    Register a new account and receive a session token.

    `role` is optional and limited by the signup policy (`SIGNUP_ALLOWED_ROLES`);
    `skills` are free-form tags used for ticket assignment.
    """,
    responses={
        201: {"content": {"application/json": {"example": AUTH_RESPONSE_EXAMPLE}}},
        400: {"description": "Invalid input or email already registered"},
        403: {"description": "Requested role cannot be self-assigned"}
    }
)
async def signup(
    payload: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    token, user = await service.signup(payload)
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    responses={
        200: {"content": {"application/json": {"example": AUTH_RESPONSE_EXAMPLE}}},
        401: {"description": "Invalid email or password"}
    }
)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    token, user = await service.login(payload)
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List all users (admin)"
)
async def list_users(
    admin: User = Depends(require_roles(UserRole.ADMIN)),
    service: AuthService = Depends(get_auth_service)
):
    users = await service.list_users()
    return [UserResponse.from_domain(user) for user in users]


@router.put(
    "/update-user",
    response_model=UpdateUserResponse,
    summary="Change a user's role and skills (admin)",
    responses={
        400: {"description": "Unknown role"},
        404: {"description": "No user with that email"}
    }
)
async def update_user(
    request: Request,
    payload: UpdateUserRequest,
    admin: User = Depends(require_roles(UserRole.ADMIN)),
    service: AuthService = Depends(get_auth_service)
):
    user = await service.update_user(payload)

    logger.info(
        "Admin updated user",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "admin_id": admin.id,
            "user_id": user.id
        }
    )

    return UpdateUserResponse(
        message="User updated successfully",
        user=UserResponse.from_domain(user)
    )


# Export router for inclusion in main app
auth_router = router
