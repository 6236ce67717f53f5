"""
Auth Application DTOs
=====================

Pydantic models for auth request/response validation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from ticket_assistant.auth.domain import User, normalize_skills
from ticket_assistant.shared.api.schemas import CamelModel


# ========== Request DTOs ==========

class SignupRequest(CamelModel):
    """Request model for account creation."""
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=6, max_length=128, description="Plain-text password")
    role: Optional[str] = Field(None, description="Requested role (subject to signup policy)")
    skills: List[str] = Field(default_factory=list, description="Skill tags")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return normalize_skills(v)


class LoginRequest(CamelModel):
    """Request model for login."""
    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Plain-text password")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UpdateUserRequest(CamelModel):
    """Admin request changing a user's role and/or skills."""
    email: str = Field(..., description="Email of the user to update")
    role: Optional[str] = Field(None, description="New role")
    skills: Optional[List[str]] = Field(None, description="Replacement skill list")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else normalize_skills(v)


# ========== Response DTOs ==========

class UserSummary(CamelModel):
    """Compact user reference embedded in tickets."""
    id: str
    email: str
    role: str


class UserResponse(CamelModel):
    """Public user representation (never includes the password hash)."""
    id: str
    email: str
    role: str
    skills: List[str]
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role.value,
            skills=list(user.skills),
            created_at=user.created_at
        )


class AuthResponse(CamelModel):
    """Response for signup and login."""
    token: str
    user: UserResponse


class UpdateUserResponse(CamelModel):
    message: str
    user: UserResponse
