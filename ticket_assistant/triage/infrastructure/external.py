"""
Triage External Service Adapters
================================

Wires the triage service to the LLM provider selected in settings.
"""

from typing import Optional

from ticket_assistant.config import Settings, settings
from ticket_assistant.core import ConfigurationException
from ticket_assistant.infrastructure.llm import create_llm_client
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.triage.application import TriageService

logger = get_logger(__name__)


def build_triage_service(config: Optional[Settings] = None) -> TriageService:
    """
    Build the triage service.

    A missing API key leaves the service unconfigured rather than failing
    startup; triage then degrades to "ticket stays untriaged".
    """
    config = config or settings

    try:
        client = create_llm_client(config)
    except ConfigurationException as e:
        logger.warning(
            "Triage provider not configured - tickets will stay untriaged",
            extra={"provider": config.llm_provider, "error": e.message}
        )
        return TriageService(
            None,
            timeout_seconds=config.triage_timeout_seconds,
            configuration_error=e.message
        )

    logger.info(
        "Triage provider initialized",
        extra={"provider": client.provider, "model": client.model}
    )
    return TriageService(
        client,
        timeout_seconds=config.triage_timeout_seconds,
        temperature=config.llm_temperature,
        max_tokens=config.llm_max_tokens
    )
