"""
AI Ticket Assistant
===================

Ticket management backend with AI-assisted triage and skill-based assignment.
"""

__version__ = "1.0.0"
