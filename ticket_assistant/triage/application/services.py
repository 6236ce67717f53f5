"""
Triage Application Services
============================

Calls the completion provider and turns its answer into a TriageResult.
"""

import asyncio
import time
from typing import Optional

from ticket_assistant.config import settings
from ticket_assistant.core import LLMException, ValidationException
from ticket_assistant.infrastructure.llm import ILLMClient
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.triage.domain import (
    TriagePromptBuilder,
    TriageResult,
    parse_triage_response,
)

logger = get_logger(__name__)

SAMPLE_TICKET = {
    "title": "Login page crashes after React upgrade",
    "description": "Since upgrading React the login form throws a blank screen "
                   "in production. The API returns 200 but nothing renders.",
}


class TriageService:
    """
    Service for AI ticket triage.

    Every failure (provider missing, network error, timeout, unusable
    answer) surfaces as LLMException so callers have one thing to catch.
    """

    def __init__(
        self,
        llm_client: Optional[ILLMClient],
        timeout_seconds: Optional[float] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        configuration_error: Optional[str] = None
    ):
        self._llm = llm_client
        self._timeout = timeout_seconds or settings.triage_timeout_seconds
        self._temperature = settings.llm_temperature if temperature is None else temperature
        self._max_tokens = max_tokens or settings.llm_max_tokens
        self._configuration_error = configuration_error

    @property
    def is_configured(self) -> bool:
        return self._llm is not None

    @property
    def provider(self) -> str:
        return self._llm.provider if self._llm else settings.llm_provider

    @property
    def model(self) -> str:
        return self._llm.model if self._llm else settings.llm_model

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def configuration_error(self) -> Optional[str]:
        return self._configuration_error

    async def analyze(self, title: str, description: str) -> TriageResult:
        """
        Triage a ticket by title and description.

        Raises:
            LLMException: Provider unavailable, timed out or answered garbage
        """
        if self._llm is None:
            raise LLMException(
                "Triage provider not configured",
                {"reason": self._configuration_error}
            )

        start_time = time.perf_counter()
        messages = TriagePromptBuilder.build_messages(title, description)

        try:
            response = await asyncio.wait_for(
                self._llm.chat_completion(
                    messages=messages,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                    operation="triage"
                ),
                timeout=self._timeout
            )
        except asyncio.TimeoutError:
            raise LLMException(f"Triage timed out after {self._timeout}s")
        except LLMException:
            raise
        except Exception as e:
            raise LLMException(f"Triage failed: {e}")

        try:
            fields = parse_triage_response(response.content)
        except ValidationException as e:
            logger.warning(
                "Malformed triage response",
                extra={"error": e.message, "response_preview": response.content[:200]}
            )
            raise LLMException(f"Malformed triage response: {e.message}")

        return TriageResult(
            **fields,
            model_used=response.model,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            prompt_tokens=response.prompt_tokens,
            completion_tokens=response.completion_tokens
        )
