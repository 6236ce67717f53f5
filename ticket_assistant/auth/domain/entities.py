"""
Auth Domain Entities
====================

Pure Python domain entities for accounts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ticket_assistant.config import STAFF_ROLES, UserRole


def normalize_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop blanks and de-duplicate (case-insensitively) keeping order."""
    result: List[str] = []
    seen = set()
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        cleaned = skill.strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            result.append(cleaned)
    return result


@dataclass
class User:
    """
    Account entity.

    ``role`` and ``skills`` drive authorization and ticket assignment.
    """
    id: str
    email: str
    role: UserRole
    skills: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def is_staff(self) -> bool:
        """Moderators and admins see and manage every ticket."""
        return self.role.value in STAFF_ROLES

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles
