"""
Shared test fixtures.

Every test gets a fresh SQLite database in a temporary directory and an
httpx client talking to the real FastAPI app over ASGI. Triage uses the
deterministic mock provider unless a test swaps in another client.
"""

import asyncio
from typing import Callable, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from ticket_assistant.auth.domain import User
from ticket_assistant.auth.infrastructure import (
    JWTTokenCodec,
    PasslibPasswordHasher,
    SQLAlchemyUserRepository,
)
from ticket_assistant.config import UserRole
from ticket_assistant.core import LLMException
from ticket_assistant.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    init_database,
)
from ticket_assistant.infrastructure.llm import ChatCompletionResult, ILLMClient, MockLLMClient
from ticket_assistant.main import app
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.interfaces import get_triage_service

DEFAULT_PASSWORD = "secret123"

_hasher = PasslibPasswordHasher()
_codec = JWTTokenCodec()


# ========== Stub LLM clients ==========

class FailingLLMClient(ILLMClient):
    """Provider that is always down."""

    provider = "stub"
    model = "failing-model"

    async def chat_completion(self, messages, temperature=0.3, max_tokens=800, operation="chat_completion"):
        raise LLMException("provider unavailable")


class StaticLLMClient(ILLMClient):
    """Provider that answers every prompt with the same text."""

    provider = "stub"
    model = "static-model"

    def __init__(self, content: str):
        self.content = content
        self.calls: List[List[dict]] = []

    async def chat_completion(self, messages, temperature=0.3, max_tokens=800, operation="chat_completion"):
        self.calls.append(messages)
        return ChatCompletionResult(
            content=self.content,
            model=self.model,
            prompt_tokens=10,
            completion_tokens=20,
            latency_ms=1
        )


class SlowLLMClient(ILLMClient):
    """Provider that takes longer than any sane timeout."""

    provider = "stub"
    model = "slow-model"

    async def chat_completion(self, messages, temperature=0.3, max_tokens=800, operation="chat_completion"):
        await asyncio.sleep(5)
        return ChatCompletionResult("{}", self.model, 0, 0, 5000)


# ========== Fixtures ==========

@pytest.fixture
async def database(tmp_path):
    init_database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables()
    yield
    await close_database()


@pytest.fixture
def use_triage() -> Callable[[Optional[ILLMClient]], TriageService]:
    """Install a TriageService built on the given client for the app."""

    def install(llm_client: Optional[ILLMClient]) -> TriageService:
        service = TriageService(llm_client, timeout_seconds=2)
        app.dependency_overrides[get_triage_service] = lambda: service
        return service

    return install


@pytest.fixture
async def client(database, use_triage):
    use_triage(MockLLMClient())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(database):
    """
    Create a user directly in the database.

    Returns (user, auth_headers).
    """

    async def create(
        email: str,
        role: UserRole = UserRole.USER,
        skills: Optional[List[str]] = None,
        password: str = DEFAULT_PASSWORD
    ):
        async with get_session_context() as session:
            user: User = await SQLAlchemyUserRepository(session).create(
                email=email,
                password_hash=_hasher.hash(password),
                role=role,
                skills=list(skills or [])
            )
        return user, auth_headers(_codec.encode(user))

    return create


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
