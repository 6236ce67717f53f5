"""
Auth Domain Layer
=================

Pure business objects for accounts: the User entity and skill normalisation.
"""

from ticket_assistant.auth.domain.entities import User, normalize_skills

__all__ = [
    "User",
    "normalize_skills",
]
