"""
Triage Application Layer
=========================

Contains:
- Services: TriageService (provider call with timeout and normalisation)
- DTOs: diagnostics responses
"""

from ticket_assistant.triage.application.dto import (
    TriageConfigResponse,
    TriageTestResponse,
)
from ticket_assistant.triage.application.services import TriageService

__all__ = [
    "TriageConfigResponse",
    "TriageTestResponse",
    "TriageService",
]
