"""
Auth Module
===========

Bounded Context for accounts, credentials and roles.

Responsibilities:
- Sign up and log in users, issuing signed session tokens
- Resolve the caller behind a bearer token for every protected route
- Let admins list users and change their role and skills
"""
