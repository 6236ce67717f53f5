"""
Triage Infrastructure Layer
============================

Contains:
- External: builds the TriageService on top of the configured LLM client
"""

from ticket_assistant.triage.infrastructure.external import build_triage_service

__all__ = ["build_triage_service"]
