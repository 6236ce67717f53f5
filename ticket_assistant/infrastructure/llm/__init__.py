"""
LLM Client Infrastructure
==========================

Wrapper for LLM providers (OpenAI, Z.AI, Groq) providing a clean interface
for chat completions.

The application layer depends on ILLMClient; create_llm_client() picks the
concrete provider from settings.
"""

import asyncio
import json
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from openai import AsyncOpenAI
from zai import ZaiClient

from ticket_assistant.config import Settings, settings
from ticket_assistant.core import ConfigurationException, LLMException

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class ChatCompletionResult:
    """Result of a chat completion."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


class ILLMClient(ABC):
    """
    Interface for LLM client operations.

    Only the operation the application needs is defined.
    """

    provider: str = "unknown"
    model: str = "unknown"

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 800,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""


class OpenAILLMClient(ILLMClient):
    """
    OpenAI client implementation.

    Also serves any OpenAI-compatible endpoint through ``base_url``.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None
    ):
        self._api_key = api_key
        if not self._api_key:
            raise ConfigurationException(f"{self.provider} API key not configured")

        self._client = AsyncOpenAI(api_key=self._api_key, base_url=base_url)
        self.model = model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 800,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """
        Generate chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate
            operation: Operation label for logs

        Raises:
            LLMException: If completion fails
        """
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise LLMException(f"Chat completion failed: {e}", {"operation": operation})

        usage = response.usage
        return ChatCompletionResult(
            content=response.choices[0].message.content or "",
            model=self.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=int((time.perf_counter() - start_time) * 1000)
        )


class GroqLLMClient(OpenAILLMClient):
    """
    Groq client for Llama models.

    Groq is OpenAI-compatible, so only the endpoint and key differ.
    """

    provider = "groq"

    def __init__(self, api_key: Optional[str], model: str):
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=GROQ_BASE_URL
        )


class ZAILLMClient(ILLMClient):
    """
    Z.AI SDK client implementation for GLM models.

    The SDK is synchronous; calls run in a worker thread so the event loop
    (and the caller's timeout) stay responsive.
    """

    provider = "zai"

    def __init__(self, api_key: Optional[str], model: str):
        self._api_key = api_key
        if not self._api_key:
            raise ConfigurationException("Z.AI API key not configured")

        self._client = ZaiClient(api_key=self._api_key)
        self.model = model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 800,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        start_time = time.perf_counter()

        try:
            response = await asyncio.to_thread(
                self._client.chat.completions.create,
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise LLMException(f"Chat completion failed: {e}", {"operation": operation})

        content = response.choices[0].message.content or ""

        # Z.AI doesn't always return token usage, so we estimate
        usage = getattr(response, "usage", None)
        prompt_tokens = getattr(usage, "prompt_tokens", None) or len(str(messages))
        completion_tokens = getattr(usage, "completion_tokens", None) or len(content)

        return ChatCompletionResult(
            content=content,
            model=self.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=int((time.perf_counter() - start_time) * 1000)
        )


class MockLLMClient(ILLMClient):
    """
    Mock LLM client for local runs and tests.

    Returns a triage suggestion derived from keywords in the prompt
    without calling external APIs.
    """

    provider = "mock"
    model = "mock-model"

    KNOWN_SKILLS = [
        "React", "JavaScript", "Node.js", "MongoDB", "CSS", "HTML",
        "API", "Frontend", "Backend", "DevOps", "Database", "Python",
        "Java", "Docker", "Kubernetes",
    ]
    URGENT_WORDS = ("urgent", "outage", "down", "crash", "production")

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 800,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        user_content = str(messages[-1].get("content", "")) if messages else ""
        lowered = user_content.lower()

        skills = [skill for skill in self.KNOWN_SKILLS if skill.lower() in lowered]
        is_urgent = any(word in lowered for word in self.URGENT_WORDS)

        mock_response = {
            "priority": "high" if is_urgent else "medium",
            "level": "L2" if skills else "L1",
            "relatedSkills": skills,
            "helpfulNotes": "Mock: reproduce the issue, check recent changes and logs.",
            "suggestedAssigneeRole": "moderator",
        }
        content = f"```json\n{json.dumps(mock_response, indent=2)}\n```"

        return ChatCompletionResult(
            content=content,
            model=self.model,
            prompt_tokens=len(user_content.split()),
            completion_tokens=len(content.split()),
            latency_ms=0
        )


def create_llm_client(config: Optional[Settings] = None) -> ILLMClient:
    """
    Build the LLM client selected by configuration.

    Raises:
        ConfigurationException: If the selected provider has no API key
    """
    config = config or settings

    if config.mock_llm or config.llm_provider == "mock":
        return MockLLMClient()
    if config.llm_provider == "zai":
        return ZAILLMClient(config.zai_api_key, config.llm_model)
    if config.llm_provider == "groq":
        return GroqLLMClient(config.groq_api_key, config.llm_model)
    return OpenAILLMClient(config.openai_api_key, config.llm_model)
