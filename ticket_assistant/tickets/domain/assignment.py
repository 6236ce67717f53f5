"""
Assignment Policy
=================

Routes a triaged ticket to the user whose skills best cover it.
"""

from typing import Iterable, List, Optional

from ticket_assistant.auth.domain import User
from ticket_assistant.config import UserRole


def skill_matches(user_skill: str, related_skill: str) -> bool:
    """Case-insensitive substring match in either direction."""
    a, b = user_skill.strip().lower(), related_skill.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def match_score(user: User, related_skills: Iterable[str]) -> int:
    """Number of the user's skills that match at least one related skill."""
    related = list(related_skills)
    return sum(
        1 for skill in user.skills
        if any(skill_matches(skill, other) for other in related)
    )


class AssignmentPolicy:
    """
    Picks an assignee for a triaged ticket.

    1. Candidates hold a role in ``candidate_roles`` and match at least
       one related skill. Most matching skills wins; ties go to the
       earliest-created user.
    2. Otherwise the earliest-created user holding ``fallback_role``.
    3. Otherwise nobody.

    ``users`` must be ordered by creation time.
    """

    def __init__(
        self,
        candidate_roles: Optional[Iterable[str]] = None,
        fallback_role: str = UserRole.ADMIN.value
    ):
        self.candidate_roles = set(candidate_roles or [role.value for role in UserRole])
        self.fallback_role = fallback_role

    def select(self, users: List[User], related_skills: List[str]) -> Optional[User]:
        best: Optional[User] = None
        best_score = 0

        if related_skills:
            for user in users:
                if user.role.value not in self.candidate_roles:
                    continue
                score = match_score(user, related_skills)
                # strict > keeps the earliest user on ties
                if score > best_score:
                    best, best_score = user, score

        if best is not None:
            return best

        return next(
            (user for user in users if user.role.value == self.fallback_role),
            None
        )
