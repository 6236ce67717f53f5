"""
Triage Module
=============

Bounded Context for AI-assisted ticket triage.

Responsibilities:
- Ask the completion provider for priority, level, related skills,
  helpful notes and a suggested assignee role
- Normalise the provider's free-form answer into a TriageResult
- Expose diagnostics for the provider's configuration and availability
"""
