"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="ai-ticket-assistant", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)
    api_prefix: str = Field(
        default="",
        description="Prefix mounted in front of /auth and /tickets (e.g. /api)"
    )

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/tickets",
        description="Database connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Auth ==========
    jwt_secret: str = Field(
        default="change-me-in-production",
        description="Secret used to sign session tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        description="Session token lifetime in minutes",
        ge=1
    )
    signup_allowed_roles: List[str] = Field(
        default=["user", "moderator", "admin"],
        description="Roles a caller may request for themselves at signup"
    )
    bootstrap_admin_email: Optional[str] = Field(
        default=None,
        description="Admin account created at startup when missing"
    )
    bootstrap_admin_password: Optional[str] = Field(
        default=None,
        description="Password for the bootstrap admin account"
    )

    # ========== LLM Settings ==========
    llm_provider: str = Field(
        default="openai",
        description="Completion provider used for triage: openai, zai, groq or mock"
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    zai_api_key: Optional[str] = Field(default=None, description="Z.AI API key for GLM models")
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses for testing (no API calls)"
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="Model used for ticket triage"
    )
    llm_temperature: float = Field(
        default=0.3,
        description="Default temperature for LLM",
        ge=0.0,
        le=1.0
    )
    llm_max_tokens: int = Field(
        default=800,
        description="Default max tokens for LLM generation",
        ge=1,
        le=8000
    )
    triage_timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound for a single triage call",
        gt=0,
        le=300
    )

    # ========== Assignment Policy ==========
    assignment_candidate_roles: List[str] = Field(
        default=["user", "moderator", "admin"],
        description="Roles eligible for skill-based assignment"
    )
    assignment_fallback_role: str = Field(
        default="admin",
        description="Role that receives tickets no candidate's skills match"
    )

    # ========== Dashboard ==========
    dashboard_recent_limit: int = Field(
        default=5,
        description="Number of recent tickets on the dashboard",
        ge=1,
        le=50
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("llm_provider")
    @classmethod
    def validate_llm_provider(cls, v: str) -> str:
        allowed = {"openai", "zai", "groq", "mock"}
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"llm_provider must be one of {allowed}")
        return v

    @field_validator("signup_allowed_roles", "assignment_candidate_roles")
    @classmethod
    def validate_role_list(cls, v: List[str]) -> List[str]:
        unknown = [role for role in v if role not in VALID_ROLES]
        if unknown:
            raise ValueError(f"unknown roles: {unknown}")
        return v

    @field_validator("assignment_fallback_role")
    @classmethod
    def validate_fallback_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"assignment_fallback_role must be one of {VALID_ROLES}")
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


# ========== Constants ==========

class UserRole(str, Enum):
    """Account roles."""
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TicketPriority(str, Enum):
    """Triage priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TicketLevel(str, Enum):
    """Support tier required to handle the ticket."""
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"


# ========== Lists for validation ==========

VALID_ROLES = [role.value for role in UserRole]
STAFF_ROLES = [UserRole.MODERATOR.value, UserRole.ADMIN.value]
VALID_STATUSES = [status.value for status in TicketStatus]
VALID_PRIORITIES = [priority.value for priority in TicketPriority]
VALID_LEVELS = [level.value for level in TicketLevel]


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
