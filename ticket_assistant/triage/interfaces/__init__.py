"""
Triage Interface Layer
======================

Contains:
- Controllers: provider diagnostics endpoints
- Dependencies: access to the process-wide TriageService
"""

from ticket_assistant.triage.interfaces.controllers import get_triage_service, triage_router

__all__ = ["get_triage_service", "triage_router"]
