"""
Tickets Application Layer
=========================

Contains:
- Services: ticket workflows and dashboard aggregation
- DTOs: request/response models for the tickets API
"""

from ticket_assistant.tickets.application.dto import (
    TicketCreateRequest,
    StatusUpdateRequest,
    TicketResponse,
    PaginationInfo,
    TicketListResponse,
    TicketEnvelope,
    TicketMessageResponse,
    DashboardOverview,
    TeamMemberStats,
    DashboardStatsResponse,
)
from ticket_assistant.tickets.application.services import (
    TicketService,
    ITicketRepository,
)

__all__ = [
    # DTOs
    "TicketCreateRequest",
    "StatusUpdateRequest",
    "TicketResponse",
    "PaginationInfo",
    "TicketListResponse",
    "TicketEnvelope",
    "TicketMessageResponse",
    "DashboardOverview",
    "TeamMemberStats",
    "DashboardStatsResponse",
    # Services
    "TicketService",
    # Interfaces
    "ITicketRepository",
]
