"""
Tickets Application DTOs
========================

Pydantic models for ticket request/response validation.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from ticket_assistant.auth.application import UserSummary
from ticket_assistant.auth.domain import User
from ticket_assistant.shared.api.schemas import CamelModel
from ticket_assistant.tickets.domain import Pagination, Ticket


def _summary(user: Optional[User]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user.id, email=user.email, role=user.role.value)


# ========== Request DTOs ==========

class TicketCreateRequest(CamelModel):
    """Request model for ticket creation."""
    title: str = Field(..., min_length=1, max_length=500, description="Short summary")
    description: str = Field(..., min_length=1, max_length=20000, description="Full problem description")

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class StatusUpdateRequest(CamelModel):
    """
    Request model for a status change.

    ``status`` is checked by the service so an unknown value yields a 400
    with the allowed values instead of a schema error.
    """
    status: str = Field(..., description="TODO, IN_PROGRESS or DONE")


# ========== Response DTOs ==========

class TicketResponse(CamelModel):
    """Response model for a ticket."""
    id: str
    title: str
    description: str
    status: str
    priority: Optional[str] = None
    level: Optional[str] = None
    related_skills: List[str] = Field(default_factory=list)
    helpful_notes: Optional[str] = None
    created_by: Optional[UserSummary] = None
    assigned_to: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            status=ticket.status.value,
            priority=ticket.priority.value if ticket.priority else None,
            level=ticket.level.value if ticket.level else None,
            related_skills=list(ticket.related_skills),
            helpful_notes=ticket.helpful_notes,
            created_by=_summary(ticket.created_by),
            assigned_to=_summary(ticket.assigned_to),
            created_at=ticket.created_at,
            updated_at=ticket.updated_at
        )


class PaginationInfo(CamelModel):
    current_page: int
    total_pages: int
    total_tickets: int
    has_next_page: bool
    has_prev_page: bool
    limit: int

    @classmethod
    def from_domain(cls, pagination: Pagination) -> "PaginationInfo":
        return cls(
            current_page=pagination.page,
            total_pages=pagination.total_pages,
            total_tickets=pagination.total,
            has_next_page=pagination.has_next,
            has_prev_page=pagination.has_prev,
            limit=pagination.limit
        )


class TicketListResponse(CamelModel):
    tickets: List[TicketResponse]
    pagination: PaginationInfo


class TicketEnvelope(CamelModel):
    ticket: TicketResponse


class TicketMessageResponse(CamelModel):
    message: str
    ticket: TicketResponse


# ========== Dashboard DTOs ==========

class DashboardOverview(CamelModel):
    """Ticket counts by creation window (UTC)."""
    today: int
    week: int
    month: int
    total: int


class TeamMemberStats(CamelModel):
    user_id: str
    email: str
    role: str
    total_assigned: int
    todo: int
    in_progress: int
    done: int
    completion_rate: float


class DashboardStatsResponse(CamelModel):
    """Aggregated view for moderators and admins."""
    overview: DashboardOverview
    status_breakdown: Dict[str, int]
    priority_breakdown: Dict[str, int]
    level_breakdown: Dict[str, int]
    team_performance: List[TeamMemberStats]
    recent_tickets: List[TicketResponse]
