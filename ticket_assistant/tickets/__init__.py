"""
Tickets Bounded Context
=======================

Ticket creation, status lifecycle, role-scoped listing, dashboard
aggregation and skill-based assignment of triaged tickets.
"""
