"""
Triage Controllers (API Routes)
===============================

Diagnostics for the AI triage provider.
"""

import time

from fastapi import APIRouter, Depends, Request

from ticket_assistant.auth.domain import User
from ticket_assistant.auth.interfaces import get_current_user
from ticket_assistant.config import settings
from ticket_assistant.core import ApplicationException
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.triage.application import (
    TriageConfigResponse,
    TriageService,
    TriageTestResponse,
)
from ticket_assistant.triage.application.dto import TriageSuggestion
from ticket_assistant.triage.application.services import SAMPLE_TICKET
from ticket_assistant.triage.infrastructure import build_triage_service

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets/ai", tags=["AI Triage"])


# ========== Dependency Injection ==========

def get_triage_service(request: Request) -> TriageService:
    """Return the TriageService built at startup."""
    service = getattr(request.app.state, "triage_service", None)
    if service is None:
        service = build_triage_service()
        request.app.state.triage_service = service
    return service


# ========== Route Handlers ==========

@router.get(
    "/config",
    response_model=TriageConfigResponse,
    summary="Show triage provider configuration"
)
async def triage_config(
    user: User = Depends(get_current_user),
    service: TriageService = Depends(get_triage_service)
):
    return TriageConfigResponse(
        configured=service.is_configured,
        provider=service.provider,
        model=service.model,
        mock=settings.mock_llm or service.provider == "mock",
        timeout_seconds=service.timeout_seconds,
        error=service.configuration_error
    )


@router.get(
    "/test",
    response_model=TriageTestResponse,
    summary="Run triage on a sample ticket",
    description="""
    Sends a fixed sample ticket through the provider and reports the outcome.

    Provider failures are reported in the body (`success: false`), not as an
    error status.
    """
)
async def triage_test(
    request: Request,
    user: User = Depends(get_current_user),
    service: TriageService = Depends(get_triage_service)
):
    start_time = time.perf_counter()

    try:
        result = await service.analyze(SAMPLE_TICKET["title"], SAMPLE_TICKET["description"])
    except ApplicationException as e:
        latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.warning(
            "Triage test failed",
            extra={
                "correlation_id": getattr(request.state, "correlation_id", "unknown"),
                "provider": service.provider,
                "error": e.message,
                "latency_ms": latency_ms
            }
        )
        return TriageTestResponse(
            success=False,
            provider=service.provider,
            model=service.model,
            latency_ms=latency_ms,
            error=e.message
        )

    return TriageTestResponse(
        success=True,
        provider=service.provider,
        model=result.model_used,
        latency_ms=int((time.perf_counter() - start_time) * 1000),
        result=TriageSuggestion.model_validate(result.to_dict())
    )


# Export router for inclusion in main app
triage_router = router
