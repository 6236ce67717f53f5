"""
Ticket Controllers (API Routes)
===============================

FastAPI routes for ticket creation, listing, status changes and the
staff dashboard.

Controllers are thin - they delegate to TicketService.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.domain import User
from ticket_assistant.auth.infrastructure import SQLAlchemyUserRepository
from ticket_assistant.auth.interfaces import get_current_user, require_roles
from ticket_assistant.config import UserRole, settings
from ticket_assistant.infrastructure.database import get_session, get_session_context
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.tickets.application import (
    DashboardStatsResponse,
    StatusUpdateRequest,
    TicketCreateRequest,
    TicketEnvelope,
    TicketListResponse,
    TicketMessageResponse,
    TicketResponse,
    TicketService,
    PaginationInfo,
)
from ticket_assistant.tickets.domain import AssignmentPolicy
from ticket_assistant.tickets.infrastructure import SQLAlchemyTicketRepository
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.interfaces import get_triage_service

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])


# ========== Example payloads for Swagger ==========

TICKET_EXAMPLE = {
    "id": "0b6f4c1e-2f7a-4c53-9a55-1b1f3f2f9a01",
    "title": "Login page crashes after React upgrade",
    "description": "Blank screen on the login form since the upgrade.",
    "status": "TODO",
    "priority": "high",
    "level": "L2",
    "relatedSkills": ["React", "JavaScript"],
    "helpfulNotes": "Check the error boundary and the router version.",
    "createdBy": {"id": "6f1c2d3e-0000-4000-8000-000000000001", "email": "dev@example.com", "role": "user"},
    "assignedTo": {"id": "6f1c2d3e-0000-4000-8000-000000000002", "email": "mod@example.com", "role": "moderator"},
    "createdAt": "2024-01-15T10:00:00Z",
    "updatedAt": "2024-01-15T10:00:05Z"
}


# ========== Dependencies ==========

def build_ticket_service(session: AsyncSession) -> TicketService:
    """Wire a TicketService onto a database session."""
    return TicketService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyUserRepository(session),
        recent_limit=settings.dashboard_recent_limit
    )


async def get_ticket_service(
    session: AsyncSession = Depends(get_session)
) -> TicketService:
    """Get ticket service instance."""
    return build_ticket_service(session)


def get_assignment_policy() -> AssignmentPolicy:
    return AssignmentPolicy(
        candidate_roles=settings.assignment_candidate_roles,
        fallback_role=settings.assignment_fallback_role
    )


async def run_ticket_triage(
    ticket_id: str,
    triage_service: TriageService,
    assignment_policy: AssignmentPolicy
) -> None:
    """
    Background job: triage a committed ticket in its own session.

    Runs after the response is sent, so errors end here in the log.
    """
    try:
        async with get_session_context() as session:
            service = build_ticket_service(session)
            await service.apply_triage(ticket_id, triage_service, assignment_policy)
    except Exception:
        logger.exception("Background triage crashed", extra={"ticket_id": ticket_id})


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=TicketListResponse,
    summary="List tickets",
    description="""
    Newest first. Users see the tickets assigned to them; moderators and
    admins see every ticket.

    `page` must be at least 1 and `limit` between 1 and 100.
    """
)
async def list_tickets(
    page: int = Query(1, description="Page number (1-based)"),
    limit: int = Query(10, description="Tickets per page (max 100)"),
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    tickets, pagination = await service.list_tickets(user, page=page, limit=limit)
    return TicketListResponse(
        tickets=[TicketResponse.from_domain(ticket) for ticket in tickets],
        pagination=PaginationInfo.from_domain(pagination)
    )


@router.post(
    "",
    response_model=TicketMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a ticket",
    description="""
    Stores the ticket with status `TODO` and returns immediately.

    AI triage (priority, level, related skills, helpful notes) and
    skill-based assignment run in the background; poll `GET /tickets/{id}`
    to see the enriched record. If triage fails the ticket simply stays
    untriaged.
    """,
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {"message": "Ticket created and processing started", "ticket": TICKET_EXAMPLE}
                }
            }
        }
    }
)
async def create_ticket(
    request: Request,
    payload: TicketCreateRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    service: TicketService = Depends(get_ticket_service),
    triage_service: TriageService = Depends(get_triage_service),
    assignment_policy: AssignmentPolicy = Depends(get_assignment_policy)
):
    ticket = await service.create(user, payload)

    # Background triage uses its own session and must see the row
    await session.commit()

    background_tasks.add_task(run_ticket_triage, ticket.id, triage_service, assignment_policy)

    logger.info(
        "Ticket triage scheduled",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "ticket_id": ticket.id,
            "triage_configured": triage_service.is_configured
        }
    )

    return TicketMessageResponse(
        message="Ticket created and processing started",
        ticket=TicketResponse.from_domain(ticket)
    )


@router.get(
    "/dashboard/stats",
    response_model=DashboardStatsResponse,
    summary="Dashboard statistics (moderator/admin)"
)
async def dashboard_stats(
    user: User = Depends(require_roles(UserRole.MODERATOR, UserRole.ADMIN)),
    service: TicketService = Depends(get_ticket_service)
):
    return await service.dashboard()


@router.get(
    "/{ticket_id}",
    response_model=TicketEnvelope,
    summary="Get a ticket",
    responses={404: {"description": "Ticket not found or not visible to the caller"}}
)
async def get_ticket(
    ticket_id: str,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.get(ticket_id, user)
    return TicketEnvelope(ticket=TicketResponse.from_domain(ticket))


@router.put(
    "/{ticket_id}/status",
    response_model=TicketMessageResponse,
    summary="Change a ticket's status",
    description="""
    Allowed values: `TODO`, `IN_PROGRESS`, `DONE`. Any transition between
    them is accepted.

    Only the assignee, a moderator or an admin may change the status.
    """,
    responses={
        400: {"description": "Unknown status value"},
        403: {"description": "Caller is not the assignee or staff"},
        404: {"description": "Ticket not found"}
    }
)
async def update_ticket_status(
    ticket_id: str,
    payload: StatusUpdateRequest,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.update_status(ticket_id, payload.status, user)
    return TicketMessageResponse(
        message="Ticket status updated successfully",
        ticket=TicketResponse.from_domain(ticket)
    )


# Export router for inclusion in main app
tickets_router = router
