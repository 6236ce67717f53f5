"""
Shared API Layer
================

Middleware, exception handlers and base schemas used by every router.
"""
