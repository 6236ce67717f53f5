"""
Tickets Domain Entities
=======================

Pure Python domain entities - no framework dependencies.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ticket_assistant.auth.domain import User
from ticket_assistant.config import (
    VALID_STATUSES,
    TicketLevel,
    TicketPriority,
    TicketStatus,
)
from ticket_assistant.core import ValidationException

MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000


def parse_status(value: str) -> TicketStatus:
    """Convert a wire value into a TicketStatus or raise a validation error."""
    try:
        return TicketStatus(value)
    except ValueError:
        raise ValidationException(
            f"Invalid status '{value}'",
            {"allowed": VALID_STATUSES}
        )


def completion_rate(done: int, total: int) -> float:
    """Share of assigned tickets that are DONE; 0 for nobody's workload."""
    if total <= 0:
        return 0.0
    return round(done / total, 4)


@dataclass
class Ticket:
    """
    Ticket entity.

    Triage fields stay None (and related_skills empty) until the
    background triage succeeds.
    """
    id: str
    title: str
    description: str
    status: TicketStatus
    created_by: Optional[User]
    assigned_to: Optional[User] = None
    priority: Optional[TicketPriority] = None
    level: Optional[TicketLevel] = None
    related_skills: List[str] = field(default_factory=list)
    helpful_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_assigned_to(self, user: User) -> bool:
        return self.assigned_to is not None and self.assigned_to.id == user.id

    def is_created_by(self, user: User) -> bool:
        return self.created_by is not None and self.created_by.id == user.id

    def can_view(self, user: User) -> bool:
        return user.is_staff or self.is_assigned_to(user) or self.is_created_by(user)

    def can_update_status(self, user: User) -> bool:
        return user.is_staff or self.is_assigned_to(user)


@dataclass(frozen=True)
class Pagination:
    """
    Page window over an ordered result set.

    Examples:
        >>> p = Pagination(page=3, limit=10, total=25)
        >>> p.total_pages, p.has_next, p.has_prev
        (3, False, True)
    """
    page: int
    limit: int
    total: int = 0

    def __post_init__(self):
        if self.page < 1:
            raise ValidationException("page must be >= 1", {"page": self.page})
        if self.limit < 1:
            raise ValidationException("limit must be >= 1", {"limit": self.limit})
        if self.limit > MAX_PAGE_SIZE:
            raise ValidationException(
                f"limit must be <= {MAX_PAGE_SIZE}", {"limit": self.limit}
            )
        if self.page > MAX_PAGE:
            raise ValidationException(f"page must be <= {MAX_PAGE}", {"page": self.page})

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def with_total(self, total: int) -> "Pagination":
        return Pagination(page=self.page, limit=self.limit, total=total)
