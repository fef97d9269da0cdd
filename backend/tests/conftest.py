# shared fixtures for backend api tests
# provides a fresh in-memory store, a scripted classifier, and httpx test clients

import asyncio
from typing import Optional

import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport

from mindtrack.main import app
from mindtrack.errors import ClassificationFailed
from mindtrack.models.cbt import ThoughtDiagnosis
from mindtrack.services.store import MemoryStore, get_store
from mindtrack.services.classifier import ThoughtClassifier, get_classifier
from mindtrack.services.cbt_session import SessionRegistry, get_session_registry
from mindtrack.services.journal_service import JournalService


# sample data

SITUATION = "Presenting to my boss"
EMOTION = "anxious"
THOUGHT = "I will fail and everyone will judge me"

SAMPLE_DIAGNOSIS = ThoughtDiagnosis(
    thoughtPattern="Catastrophizing",
    patternExplanation="You are predicting the worst possible outcome without evidence that it will happen.",
    challenge="What evidence do you have that the presentation will go badly, and what went well last time?",
    reframe="I am prepared, and even if parts don't go perfectly my boss will see the effort I put in.",
)

SAMPLE_ENTRY = {
    "userId": 1,
    "situation": SITUATION,
    "emotion": EMOTION,
    "thought": THOUGHT,
    "challenge": SAMPLE_DIAGNOSIS.challenge,
    "reframe": SAMPLE_DIAGNOSIS.reframe,
}


class FakeClassifier(ThoughtClassifier):
    """scripted classifier: returns a fixed diagnosis or fails, optionally waits on a gate"""

    def __init__(self, diagnosis: Optional[ThoughtDiagnosis] = SAMPLE_DIAGNOSIS, fail: bool = False):
        super().__init__(api_key="test-key", model="fake-model", timeout=1.0)
        self.diagnosis = diagnosis
        self.fail = fail
        self.gate: Optional[asyncio.Event] = None
        self.calls = []

    async def classify(self, situation: str, emotion: str, thought: str) -> ThoughtDiagnosis:
        self.calls.append((situation, emotion, thought))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise ClassificationFailed()
        return self.diagnosis


@pytest_asyncio.fixture
async def mem_store():
    """fresh opened store with seeded reference data for each test"""
    store = MemoryStore()
    await store.open(seed=True)
    yield store
    await store.close()


@pytest.fixture
def fake_classifier():
    return FakeClassifier()


@pytest.fixture
def journals(mem_store):
    return JournalService(mem_store)


@pytest.fixture
def session_registry():
    return SessionRegistry()


@pytest_asyncio.fixture
async def client(mem_store, fake_classifier, session_registry):
    """httpx async test client with store, classifier and session registry overridden"""

    async def override_get_store():
        return mem_store

    async def override_get_classifier():
        return fake_classifier

    async def override_get_session_registry():
        return session_registry

    app.dependency_overrides[get_store] = override_get_store
    app.dependency_overrides[get_classifier] = override_get_classifier
    app.dependency_overrides[get_session_registry] = override_get_session_registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
