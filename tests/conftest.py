# tests/conftest.py
import os
from typing import List, Optional, Sequence

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env (no real credentials, local test host)
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("LMSTUDIO_BASE_URL", "http://lmstudio.test")
os.environ.setdefault("LMSTUDIO_MODEL", "local-model")

# IMPORTANT: import the app after envs are set
from gateway.core.config import Settings
from gateway.main import create_app
from gateway.providers.base import BaseAdapter, ClientProbe, GenerateOptions, ProviderResult
from gateway.providers.factory import ProviderRouter
from gateway.services.content import ContentPart
from gateway.services.history import ReconciledConversation


class FakeAdapter(BaseAdapter):
    """Records what the router hands it; raises `error` when set."""

    def __init__(self, name: str, text: Optional[str] = "hello") -> None:
        super().__init__()
        self.name = name
        self.text = text
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []

    def client_probes(self) -> Sequence[ClientProbe]:
        return [ClientProbe("fake", object)]

    def _answer(self, options: GenerateOptions) -> ProviderResult:
        if self.error is not None:
            raise self.error
        return ProviderResult(provider=self.name, model=options.model or f"{self.name}-default", text=self.text)

    async def _generate(self, prompt: str, options: GenerateOptions) -> ProviderResult:
        self.calls.append(("generate", prompt, options))
        return self._answer(options)

    async def _generate_multimodal(self, parts: Sequence[ContentPart], options: GenerateOptions) -> ProviderResult:
        self.calls.append(("multimodal", list(parts), options))
        return self._answer(options)

    async def _chat(self, conversation: ReconciledConversation, options: GenerateOptions) -> ProviderResult:
        self.calls.append(("chat", conversation, options))
        return self._answer(options)


@pytest.fixture
def settings():
    return Settings(
        gemini_api_key="test-key",
        lmstudio_base_url="http://lmstudio.test",
        lmstudio_model="local-model",
    )


@pytest.fixture
def fakes():
    return {"gemini": FakeAdapter("gemini"), "lmstudio": FakeAdapter("lmstudio")}


@pytest_asyncio.fixture
async def app(settings, fakes):
    # fresh app per test so adapters never outlive an event loop
    return create_app(settings=settings, router=ProviderRouter(fakes, "gemini"))


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

