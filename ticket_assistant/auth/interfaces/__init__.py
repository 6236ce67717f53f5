"""
Auth Interfaces Layer
=====================

Contains:
- Controllers: FastAPI route handlers for /auth
- Dependencies: bearer-token resolution and role guards shared by all routers
"""

from ticket_assistant.auth.interfaces.controllers import auth_router
from ticket_assistant.auth.interfaces.dependencies import (
    get_auth_service,
    get_current_user,
    require_roles,
)

__all__ = [
    "auth_router",
    "get_auth_service",
    "get_current_user",
    "require_roles",
]
