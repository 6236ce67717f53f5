"""
Shared Kernel Module
====================

Shared infrastructure used across all bounded contexts (auth, tickets, triage).

Architecture Pattern: Modular Monolith
- Each module (auth, tickets, triage) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add ticket or auth business logic to the shared kernel.
"""
