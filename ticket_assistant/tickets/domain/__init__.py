"""
Tickets Domain Layer
====================

Contains:
- Entities: Ticket, Pagination
- Policies: AssignmentPolicy (skill-based routing)
"""

from ticket_assistant.tickets.domain.entities import (
    MAX_PAGE_SIZE,
    Pagination,
    Ticket,
    completion_rate,
    parse_status,
)
from ticket_assistant.tickets.domain.assignment import (
    AssignmentPolicy,
    match_score,
    skill_matches,
)

__all__ = [
    "MAX_PAGE_SIZE",
    "Ticket",
    "Pagination",
    "completion_rate",
    "parse_status",
    "AssignmentPolicy",
    "match_score",
    "skill_matches",
]
