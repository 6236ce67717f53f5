"""
Triage Application DTOs
========================

Pydantic models for the triage diagnostics endpoints.
"""

from typing import List, Optional

from pydantic import Field

from ticket_assistant.shared.api.schemas import CamelModel


class TriageSuggestion(CamelModel):
    """Normalised triage fields as returned by a test call."""
    priority: str
    level: Optional[str] = None
    related_skills: List[str] = Field(default_factory=list)
    helpful_notes: Optional[str] = None
    suggested_assignee_role: Optional[str] = None


class TriageConfigResponse(CamelModel):
    """Provider configuration as seen by the running service."""
    configured: bool
    provider: str
    model: str
    mock: bool
    timeout_seconds: float
    error: Optional[str] = None


class TriageTestResponse(CamelModel):
    """Outcome of a live triage call on a sample ticket."""
    success: bool
    provider: str
    model: str
    latency_ms: int
    result: Optional[TriageSuggestion] = None
    error: Optional[str] = None
