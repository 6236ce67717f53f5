"""
Auth Application Services
=========================

Orchestrates signup, login, token resolution and admin user management.

Following SOLID principles:
- Single Responsibility: AuthService owns account workflows only
- Dependency Inversion: depends on repository/hasher/codec abstractions
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from ticket_assistant.auth.application.dto import (
    LoginRequest,
    SignupRequest,
    UpdateUserRequest,
)
from ticket_assistant.auth.domain import User
from ticket_assistant.config import VALID_ROLES, UserRole
from ticket_assistant.core import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


# ========== Repository Interfaces (Dependency Inversion) ==========

class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (lower-cased) email."""

    @abstractmethod
    async def get_password_hash(self, email: str) -> Optional[Tuple[User, str]]:
        """Get a user together with their stored password hash."""

    @abstractmethod
    async def create(
        self,
        email: str,
        password_hash: str,
        role: UserRole,
        skills: List[str]
    ) -> User:
        """Create new user."""

    @abstractmethod
    async def update_profile(
        self,
        user_id: str,
        role: Optional[UserRole] = None,
        skills: Optional[List[str]] = None
    ) -> User:
        """Update role and/or skills."""

    @abstractmethod
    async def list_all(self) -> List[User]:
        """List all users ordered by creation."""


class IPasswordHasher(ABC):
    """Interface for password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a plain-text password."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain-text password against a stored hash."""


class ITokenCodec(ABC):
    """Interface for session token signing."""

    @abstractmethod
    def encode(self, user: User) -> str:
        """Issue a signed token for the user."""

    @abstractmethod
    def decode(self, token: str) -> dict:
        """Verify a token and return its claims."""


# ========== Application Services ==========

def parse_role(value: str) -> UserRole:
    """Convert a wire value into a UserRole or raise a validation error."""
    try:
        return UserRole(value)
    except ValueError:
        raise ValidationException(
            f"Invalid role '{value}'",
            {"allowed": VALID_ROLES}
        )


class AuthService:
    """
    Service for account workflows.

    Coordinates between the user repository, password hashing and tokens.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_codec: ITokenCodec,
        allowed_signup_roles: Optional[Iterable[str]] = None
    ):
        self._users = user_repository
        self._hasher = password_hasher
        self._tokens = token_codec
        self._allowed_signup_roles = set(allowed_signup_roles or [UserRole.USER.value])

    async def signup(self, request: SignupRequest) -> Tuple[str, User]:
        """
        Create an account and issue its first session token.

        Raises:
            ValidationException: Email already registered or role unknown
            AuthorizationException: Requested role may not be self-assigned
        """
        role = parse_role(request.role) if request.role else UserRole.USER
        if role.value not in self._allowed_signup_roles:
            raise AuthorizationException(
                f"Role '{role.value}' cannot be self-assigned at signup"
            )

        if await self._users.get_by_email(request.email) is not None:
            raise ValidationException("User already exists", {"email": request.email})

        user = await self._users.create(
            email=request.email,
            password_hash=self._hasher.hash(request.password),
            role=role,
            skills=request.skills
        )

        logger.info("User signed up", extra={"user_id": user.id, "role": user.role.value})
        return self._tokens.encode(user), user

    async def login(self, request: LoginRequest) -> Tuple[str, User]:
        """
        Verify credentials and issue a session token.

        Raises:
            AuthenticationException: Unknown email or wrong password
        """
        record = await self._users.get_password_hash(request.email)
        if record is None:
            raise AuthenticationException(INVALID_CREDENTIALS)

        user, password_hash = record
        if not self._hasher.verify(request.password, password_hash):
            raise AuthenticationException(INVALID_CREDENTIALS)

        logger.info("User logged in", extra={"user_id": user.id})
        return self._tokens.encode(user), user

    async def authenticate(self, token: str) -> User:
        """
        Resolve the user behind a bearer token.

        The user is reloaded so role changes take effect immediately.

        Raises:
            AuthenticationException: Invalid token or user no longer exists
        """
        claims = self._tokens.decode(token)
        user_id = claims.get("sub")
        if not user_id:
            raise AuthenticationException("Token has no subject")

        user = await self._users.get_by_id(str(user_id))
        if user is None:
            raise AuthenticationException("User for token no longer exists")
        return user

    async def list_users(self) -> List[User]:
        return await self._users.list_all()

    async def update_user(self, request: UpdateUserRequest) -> User:
        """
        Change a user's role and/or skills.

        Raises:
            ResourceNotFoundException: No user with that email
            ValidationException: Unknown role
        """
        role = parse_role(request.role) if request.role else None

        user = await self._users.get_by_email(request.email)
        if user is None:
            raise ResourceNotFoundException("User", request.email)

        updated = await self._users.update_profile(user.id, role=role, skills=request.skills)
        logger.info(
            "User updated",
            extra={"user_id": updated.id, "role": updated.role.value, "skills": updated.skills}
        )
        return updated

    async def ensure_admin(self, email: str, password: str) -> User:
        """Create the bootstrap admin if no account uses that email."""
        email = email.strip().lower()
        existing = await self._users.get_by_email(email)
        if existing is not None:
            return existing

        user = await self._users.create(
            email=email,
            password_hash=self._hasher.hash(password),
            role=UserRole.ADMIN,
            skills=[]
        )
        logger.info("Bootstrap admin created", extra={"user_id": user.id})
        return user
