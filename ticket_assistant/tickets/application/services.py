"""
Tickets Application Services
============================

Orchestrates ticket workflows: creation, visibility, status changes,
dashboard aggregation and applying triage results.

Following SOLID principles:
- Single Responsibility: TicketService owns ticket workflows only
- Dependency Inversion: depends on repository abstractions
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from ticket_assistant.auth.application import IUserRepository
from ticket_assistant.auth.domain import User
from ticket_assistant.config import (
    STAFF_ROLES,
    TicketLevel,
    TicketPriority,
    TicketStatus,
)
from ticket_assistant.core import (
    ApplicationException,
    AuthorizationException,
    ResourceNotFoundException,
)
from ticket_assistant.shared.infrastructure.logging import get_logger, log_latency
from ticket_assistant.tickets.application.dto import (
    DashboardOverview,
    DashboardStatsResponse,
    TeamMemberStats,
    TicketCreateRequest,
    TicketResponse,
)
from ticket_assistant.tickets.domain import (
    AssignmentPolicy,
    Pagination,
    Ticket,
    completion_rate,
    parse_status,
)
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.domain import TriageResult

logger = get_logger(__name__)

UNTRIAGED = "untriaged"


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def create(self, title: str, description: str, created_by_id: str) -> Ticket:
        """Persist a bare (untriaged) ticket with status TODO."""

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID."""

    @abstractmethod
    async def list_page(
        self,
        pagination: Pagination,
        assigned_to_id: Optional[str] = None
    ) -> Tuple[List[Ticket], int]:
        """Return one page (newest first) and the total count."""

    @abstractmethod
    async def update_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        """Write status and updated_at in one single-row update."""

    @abstractmethod
    async def apply_triage(
        self,
        ticket_id: str,
        triage: TriageResult,
        assigned_to_id: Optional[str]
    ) -> Optional[Ticket]:
        """Write triage fields and assignee; None if the ticket is gone."""

    @abstractmethod
    async def count_created_since(self, since: Optional[datetime] = None) -> int:
        """Count tickets created at or after ``since`` (all when None)."""

    @abstractmethod
    async def count_by_field(self, field_name: str) -> Dict[Optional[str], int]:
        """Count tickets grouped by status, priority or level."""

    @abstractmethod
    async def assignment_counts(self) -> Dict[str, Dict[str, int]]:
        """Per assignee id, ticket counts by status."""

    @abstractmethod
    async def list_recent(self, limit: int) -> List[Ticket]:
        """Most recently created tickets."""


# ========== Application Services ==========

class TicketService:
    """
    Service for ticket workflows.

    Coordinates between ticket and user repositories.
    """

    def __init__(
        self,
        ticket_repository: ITicketRepository,
        user_repository: IUserRepository,
        recent_limit: int = 5
    ):
        self._tickets = ticket_repository
        self._users = user_repository
        self._recent_limit = recent_limit

    async def create(self, user: User, request: TicketCreateRequest) -> Ticket:
        """Persist a bare ticket. Triage is scheduled by the caller."""
        ticket = await self._tickets.create(
            title=request.title,
            description=request.description,
            created_by_id=user.id
        )
        logger.info("Ticket created", extra={"ticket_id": ticket.id, "user_id": user.id})
        return ticket

    async def get(self, ticket_id: str, user: User) -> Ticket:
        """
        Get a ticket the caller may see.

        Raises:
            ResourceNotFoundException: Missing, or not visible to the caller
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None or not ticket.can_view(user):
            raise ResourceNotFoundException("Ticket", ticket_id)
        return ticket

    async def list_tickets(self, user: User, page: int = 1, limit: int = 10) -> Tuple[List[Ticket], Pagination]:
        """
        List tickets newest first.

        Users only see tickets assigned to them; staff see everything.

        Raises:
            ValidationException: page or limit outside the allowed window
        """
        pagination = Pagination(page=page, limit=limit)
        assigned_to_id = None if user.is_staff else user.id

        tickets, total = await self._tickets.list_page(pagination, assigned_to_id=assigned_to_id)
        return tickets, pagination.with_total(total)

    async def update_status(self, ticket_id: str, status: str, user: User) -> Ticket:
        """
        Move a ticket to another status.

        Raises:
            ResourceNotFoundException: Unknown ticket
            ValidationException: Status outside TODO/IN_PROGRESS/DONE
            AuthorizationException: Caller is neither assignee nor staff
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)

        new_status = parse_status(status)

        if not ticket.can_update_status(user):
            raise AuthorizationException(
                "Only the assignee, a moderator or an admin can change the status",
                {"ticket_id": ticket_id}
            )

        updated = await self._tickets.update_status(ticket_id, new_status)
        logger.info(
            "Ticket status updated",
            extra={
                "ticket_id": ticket_id,
                "user_id": user.id,
                "from_status": ticket.status.value,
                "to_status": new_status.value
            }
        )
        return updated

    async def dashboard(self, now: Optional[datetime] = None) -> DashboardStatsResponse:
        """Aggregate ticket counts and per-member workload."""
        now = now or datetime.now(timezone.utc)
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

        overview = DashboardOverview(
            today=await self._tickets.count_created_since(midnight),
            week=await self._tickets.count_created_since(now - timedelta(days=7)),
            month=await self._tickets.count_created_since(now - timedelta(days=30)),
            total=await self._tickets.count_created_since(None)
        )

        by_status = await self._tickets.count_by_field("status")
        by_priority = await self._tickets.count_by_field("priority")
        by_level = await self._tickets.count_by_field("level")

        return DashboardStatsResponse(
            overview=overview,
            status_breakdown={s.value: by_status.get(s.value, 0) for s in TicketStatus},
            priority_breakdown=_with_untriaged(by_priority, [p.value for p in TicketPriority]),
            level_breakdown=_with_untriaged(by_level, [level.value for level in TicketLevel]),
            team_performance=await self._team_performance(),
            recent_tickets=[
                TicketResponse.from_domain(ticket)
                for ticket in await self._tickets.list_recent(self._recent_limit)
            ]
        )

    async def _team_performance(self) -> List[TeamMemberStats]:
        counts = await self._tickets.assignment_counts()
        users = await self._users.list_all()

        rows = []
        for user in users:
            if user.role.value not in STAFF_ROLES and user.id not in counts:
                continue

            by_status = counts.get(user.id, {})
            todo = by_status.get(TicketStatus.TODO.value, 0)
            in_progress = by_status.get(TicketStatus.IN_PROGRESS.value, 0)
            done = by_status.get(TicketStatus.DONE.value, 0)
            total = todo + in_progress + done

            rows.append(TeamMemberStats(
                user_id=user.id,
                email=user.email,
                role=user.role.value,
                total_assigned=total,
                todo=todo,
                in_progress=in_progress,
                done=done,
                completion_rate=completion_rate(done, total)
            ))
        return rows

    async def apply_triage(
        self,
        ticket_id: str,
        triage_service: TriageService,
        assignment_policy: AssignmentPolicy
    ) -> Optional[Ticket]:
        """
        Triage a stored ticket and route it to an assignee.

        Any failure is logged and the ticket is left untriaged; this runs
        detached from the request so there is nobody to raise to.
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            logger.warning("Ticket vanished before triage", extra={"ticket_id": ticket_id})
            return None

        try:
            with log_latency(logger, "ticket_triage", ticket_id=ticket_id):
                triage = await triage_service.analyze(ticket.title, ticket.description)
        except ApplicationException as e:
            logger.warning(
                "Triage failed - ticket left untriaged",
                extra={"ticket_id": ticket_id, "error": e.message, "details": e.details}
            )
            return None

        users = await self._users.list_all()
        assignee = assignment_policy.select(users, triage.related_skills)

        updated = await self._tickets.apply_triage(
            ticket_id,
            triage,
            assigned_to_id=assignee.id if assignee else None
        )

        logger.info(
            "Ticket triaged",
            extra={
                "ticket_id": ticket_id,
                "priority": triage.priority.value,
                "level": triage.level.value if triage.level else None,
                "related_skills": triage.related_skills,
                "assigned_to": assignee.id if assignee else None,
                "suggested_assignee_role": (
                    triage.suggested_assignee_role.value
                    if triage.suggested_assignee_role else None
                ),
                "model": triage.model_used,
                "prompt_tokens": triage.prompt_tokens,
                "completion_tokens": triage.completion_tokens
            }
        )
        return updated


def _with_untriaged(counts: Dict[Optional[str], int], values: List[str]) -> Dict[str, int]:
    breakdown = {value: counts.get(value, 0) for value in values}
    breakdown[UNTRIAGED] = counts.get(None, 0)
    return breakdown
