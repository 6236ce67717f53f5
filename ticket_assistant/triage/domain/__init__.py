"""
Triage Domain Layer
===================

Contains:
- Entities: TriageResult
- Prompt and response handling: TriagePromptBuilder, parse_triage_response

This layer is framework-agnostic and contains pure business logic.
"""

from ticket_assistant.triage.domain.entities import (
    TriageResult,
    TriagePromptBuilder,
    parse_triage_response,
)

__all__ = [
    "TriageResult",
    "TriagePromptBuilder",
    "parse_triage_response",
]
