"""
Tickets Interface Layer
=======================

Contains:
- Controllers: FastAPI route handlers
"""

from ticket_assistant.tickets.interfaces.controllers import (
    get_ticket_service,
    run_ticket_triage,
    tickets_router,
)

__all__ = ["get_ticket_service", "run_ticket_triage", "tickets_router"]
