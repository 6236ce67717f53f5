"""
Auth Infrastructure Repositories
================================

SQLAlchemy implementation of the user repository.
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.application import IUserRepository
from ticket_assistant.auth.domain import User
from ticket_assistant.auth.infrastructure.models import UserModel
from ticket_assistant.config import UserRole
from ticket_assistant.core import RepositoryException, ResourceNotFoundException, ValidationException


def to_domain(model: UserModel) -> User:
    """Map a UserModel row to the domain entity."""
    return User(
        id=str(model.id),
        email=model.email,
        role=UserRole(model.role),
        skills=list(model.skills or []),
        created_at=model.created_at
    )


def parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation for users."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, user_id: str) -> Optional[UserModel]:
        user_uuid = parse_uuid(user_id)
        if user_uuid is None:
            return None
        return await self._session.get(UserModel, user_uuid)

    async def _get_model_by_email(self, email: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(UserModel.email == email.lower())
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        model = await self._get_model(user_id)
        return to_domain(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        model = await self._get_model_by_email(email)
        return to_domain(model) if model else None

    async def get_password_hash(self, email: str) -> Optional[Tuple[User, str]]:
        model = await self._get_model_by_email(email)
        if model is None:
            return None
        return to_domain(model), model.password_hash

    async def create(
        self,
        email: str,
        password_hash: str,
        role: UserRole,
        skills: List[str]
    ) -> User:
        now = datetime.now(timezone.utc)
        model = UserModel(
            id=uuid4(),
            email=email.lower(),
            password_hash=password_hash,
            role=role.value,
            skills=list(skills),
            created_at=now,
            updated_at=now
        )

        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError:
            # Lost a race against a concurrent signup with the same email
            raise ValidationException("User already exists", {"email": email})

        return to_domain(model)

    async def update_profile(
        self,
        user_id: str,
        role: Optional[UserRole] = None,
        skills: Optional[List[str]] = None
    ) -> User:
        model = await self._get_model(user_id)
        if model is None:
            raise ResourceNotFoundException("User", user_id)

        if role is not None:
            model.role = role.value
        if skills is not None:
            model.skills = list(skills)
        model.updated_at = datetime.now(timezone.utc)

        try:
            await self._session.flush()
        except Exception as e:
            raise RepositoryException(f"Failed to update user {user_id}: {e}")

        return to_domain(model)

    async def list_all(self) -> List[User]:
        stmt = select(UserModel).order_by(UserModel.created_at.asc())
        result = await self._session.execute(stmt)
        return [to_domain(model) for model in result.scalars().all()]
