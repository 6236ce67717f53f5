import pytest

from ticket_assistant.config import Settings, TicketLevel, TicketPriority, settings
from ticket_assistant.core import ConfigurationException, LLMException
from ticket_assistant.infrastructure.llm import (
    GroqLLMClient,
    MockLLMClient,
    OpenAILLMClient,
    create_llm_client,
)
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.infrastructure import build_triage_service
from tests.conftest import FailingLLMClient, SlowLLMClient, StaticLLMClient


async def test_mock_provider_triage():
    service = TriageService(MockLLMClient(), timeout_seconds=2)

    result = await service.analyze(
        "Production outage in the React app",
        "Users get a blank page after the Docker deploy."
    )

    assert result.priority == TicketPriority.HIGH
    assert result.level == TicketLevel.L2
    assert result.related_skills == ["React", "Docker"]
    assert result.helpful_notes.startswith("Mock:")
    assert result.model_used == "mock-model"


async def test_analyze_sends_system_and_user_messages():
    client = StaticLLMClient('{"priority": "low", "level": "L1", "relatedSkills": []}')
    service = TriageService(client, timeout_seconds=2)

    result = await service.analyze("Typo", "Footer says 2019")

    assert result.priority == TicketPriority.LOW
    assert result.prompt_tokens == 10
    assert [m["role"] for m in client.calls[0]] == ["system", "user"]


async def test_unconfigured_provider_raises():
    service = TriageService(None, configuration_error="openai API key not configured")

    assert service.is_configured is False
    with pytest.raises(LLMException):
        await service.analyze("a", "b")


async def test_provider_error_raises():
    with pytest.raises(LLMException):
        await TriageService(FailingLLMClient(), timeout_seconds=2).analyze("a", "b")


async def test_malformed_response_raises():
    with pytest.raises(LLMException, match="Malformed"):
        await TriageService(StaticLLMClient("I think it is urgent"), timeout_seconds=2).analyze("a", "b")


async def test_timeout_raises():
    with pytest.raises(LLMException, match="timed out"):
        await TriageService(SlowLLMClient(), timeout_seconds=0.05).analyze("a", "b")


def test_factory_picks_mock():
    assert isinstance(create_llm_client(Settings(mock_llm=True)), MockLLMClient)
    assert isinstance(create_llm_client(Settings(llm_provider="mock")), MockLLMClient)


def test_factory_requires_api_key():
    with pytest.raises(ConfigurationException):
        create_llm_client(Settings(llm_provider="groq", groq_api_key=None, mock_llm=False))


@pytest.mark.parametrize("provider", ["openai", "groq", "zai"])
def test_factory_ignores_global_keys(monkeypatch, provider):
    monkeypatch.setattr(settings, "openai_api_key", "sk-global")
    monkeypatch.setattr(settings, "groq_api_key", "gsk-global")
    monkeypatch.setattr(settings, "zai_api_key", "zai-global")
    config = Settings(
        llm_provider=provider, openai_api_key=None, groq_api_key=None, zai_api_key=None, mock_llm=False
    )

    with pytest.raises(ConfigurationException):
        create_llm_client(config)


def test_factory_uses_model_from_passed_config(monkeypatch):
    monkeypatch.setattr(settings, "llm_model", "global-model")

    openai_client = create_llm_client(
        Settings(llm_provider="openai", openai_api_key="sk-test", llm_model="gpt-x", mock_llm=False)
    )
    groq_client = create_llm_client(
        Settings(llm_provider="groq", groq_api_key="gsk-test", llm_model="llama-x", mock_llm=False)
    )

    assert isinstance(openai_client, OpenAILLMClient)
    assert openai_client.model == "gpt-x"
    assert isinstance(groq_client, GroqLLMClient)
    assert groq_client.model == "llama-x"


def test_missing_key_leaves_triage_unconfigured():
    service = build_triage_service(Settings(llm_provider="openai", openai_api_key=None, mock_llm=False))

    assert service.is_configured is False
    assert "API key" in service.configuration_error
