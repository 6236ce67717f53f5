"""
AI Ticket Assistant - Main Application
======================================

Ticket-management backend with AI-assisted triage.

Modules:
- Auth: Accounts, session tokens and admin user management
- Tickets: Ticket lifecycle, listing, dashboard and skill-based assignment
- Triage: AI classification of new tickets

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and policies
- Infrastructure: Database, LLM providers, security
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from ticket_assistant.config import settings
from ticket_assistant.core import ApplicationException

# Infrastructure
from ticket_assistant.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    init_database,
)

# Module services and routers
from ticket_assistant.auth.interfaces import auth_router
from ticket_assistant.auth.interfaces.dependencies import build_auth_service
from ticket_assistant.tickets.interfaces import tickets_router
from ticket_assistant.triage.infrastructure import build_triage_service
from ticket_assistant.triage.interfaces import triage_router

# Middleware and logging
from ticket_assistant.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    MetricsMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from ticket_assistant.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def ensure_bootstrap_admin() -> None:
    """Create the configured admin account when it does not exist yet."""
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_password):
        return

    async with get_session_context() as session:
        await build_auth_service(session).ensure_admin(
            settings.bootstrap_admin_email,
            settings.bootstrap_admin_password
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Build the triage service for the configured provider
    4. Create the bootstrap admin

    SHUTDOWN:
    1. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting AI Ticket Assistant", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()

    # Tables for development - use migrations in production.
    # If the database is down the server still starts in degraded mode.
    database_ready = True
    try:
        await create_tables()
    except Exception as e:
        database_ready = False
        logger.warning(f"Database not available - running in degraded mode: {e}")

    logger.info("Initializing triage provider")
    app.state.triage_service = build_triage_service()

    if database_ready:
        try:
            await ensure_bootstrap_admin()
        except ApplicationException as e:
            logger.warning(f"Bootstrap admin not created: {e.message}")

    logger.info("AI Ticket Assistant started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down AI Ticket Assistant")
    await close_database()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="AI Ticket Assistant API",
    description="""
    ## Ticket management with AI triage

    ### Auth
    - `POST /auth/signup`, `POST /auth/login` - obtain a bearer token
    - `GET /auth/users`, `PUT /auth/update-user` - admin user management

    ### Tickets
    - `POST /tickets` - create a ticket; triage and assignment run in the background
    - `GET /tickets`, `GET /tickets/{id}` - role-scoped listing and retrieval
    - `PUT /tickets/{id}/status` - move between `TODO`, `IN_PROGRESS` and `DONE`
    - `GET /tickets/dashboard/stats` - staff dashboard

    ### AI Triage
    - `GET /tickets/ai/config`, `GET /tickets/ai/test` - provider diagnostics

    All ticket endpoints require `Authorization: Bearer <token>`.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
# Last added runs first: the correlation ID must exist before request logging
app.add_middleware(LoggingMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(triage_router, prefix=settings.api_prefix)
app.include_router(tickets_router, prefix=settings.api_prefix)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {"database": "configured", "triage": "available (openai)"}
                }
            }
        }
    }
})
async def health_check(request: Request):
    """Health check endpoint for load balancers and orchestrators."""
    triage_service = getattr(request.app.state, "triage_service", None)
    if triage_service is None:
        triage = "initializing"
    elif triage_service.is_configured:
        triage = f"available ({triage_service.provider})"
    else:
        triage = "not_configured"

    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": {
            "database": "configured",
            "triage": triage
        }
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    prefix = settings.api_prefix
    return {
        "service": "AI Ticket Assistant",
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "auth": {
                "prefix": f"{prefix}/auth",
                "endpoints": [
                    "POST /auth/signup - Create an account",
                    "POST /auth/login - Log in",
                    "GET /auth/users - List users (admin)",
                    "PUT /auth/update-user - Update role/skills (admin)"
                ]
            },
            "tickets": {
                "prefix": f"{prefix}/tickets",
                "endpoints": [
                    "GET /tickets - List tickets",
                    "POST /tickets - Create ticket",
                    "GET /tickets/{id} - Get ticket",
                    "PUT /tickets/{id}/status - Update status",
                    "GET /tickets/dashboard/stats - Dashboard (moderator/admin)",
                    "GET /tickets/ai/config - Triage provider configuration",
                    "GET /tickets/ai/test - Triage provider smoke test"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ticket_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
