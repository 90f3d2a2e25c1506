"""
Shared fixtures: in-memory persistence, a bootstrapped catalog and an API
client wired to a fake Gemini client.
"""

import pytest
from fastapi.testclient import TestClient

from skillshots.ai.services import ContentGenerationService
from skillshots.catalog.models import QuizQuestion
from skillshots.catalog.persistence import MemorySnapshotStore
from skillshots.catalog.seed import DEFAULT_PASSWORD
from skillshots.catalog.store import Catalog
from skillshots.core.config import Configuration
from skillshots.core.errors import ExternalServiceError
from skillshots.main import create_app

# Correct answer is always option 0
FAKE_QUIZ = [
    {"question": "What comes first?", "options": ["Safety", "Speed", "Cost", "Style"], "correct_answer_index": 0},
    {"question": "Who do you notify?", "options": ["Safety Officer", "Nobody", "Press", "Friends"], "correct_answer_index": 0},
    {"question": "Form deadline?", "options": ["2 hours", "2 days", "2 weeks", "Never"], "correct_answer_index": 0},
]


class FakeGeminiClient:
    """Stands in for GeminiClient; records calls and returns canned output"""

    def __init__(self):
        self.calls = []
        self.json_response = FAKE_QUIZ
        self.text_response = "A helpful answer."
        self.audio = b"\x00\x01\x02\x03"
        self.fail = False

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail:
            raise ExternalServiceError("The AI service is unavailable. Please try again.")

    async def generate(self, contents, model=None, json_schema=None, system_instruction=None):
        self._record("generate", contents, model)
        return self.text_response

    async def generate_json(self, contents, json_schema, model=None):
        self._record("generate_json", contents, json_schema)
        return self.json_response

    async def generate_with_thinking(self, prompt, system_instruction=None):
        self._record("generate_with_thinking", prompt)
        return "A considered answer."

    async def synthesize(self, text):
        self._record("synthesize", text)
        return self.audio


@pytest.fixture
def config():
    return Configuration(jwt_secret_key="test-secret")


class FlakySnapshotStore(MemorySnapshotStore):
    """Memory store whose saves fail for the kinds listed in `failing`"""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.failing = set()

    async def save(self, kind, snapshot):
        if kind in self.failing:
            raise ExternalServiceError(f"Could not save {kind}")
        await super().save(kind, snapshot)


@pytest.fixture
def store():
    return FlakySnapshotStore()


@pytest.fixture
async def catalog(store, config):
    catalog = Catalog(store, config)
    await catalog.bootstrap()
    return catalog


@pytest.fixture
def gemini():
    return FakeGeminiClient()


@pytest.fixture
def generator(config, gemini):
    return ContentGenerationService(config, client=gemini)


@pytest.fixture
def quiz_questions():
    return [QuizQuestion(**q) for q in FAKE_QUIZ]


@pytest.fixture
def client(config, store, generator):
    app = create_app(configuration=config, snapshot_store=store, generator=generator)
    with TestClient(app) as client:
        yield client


def login(client, email, password=DEFAULT_PASSWORD) -> dict:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def creator_headers(client):
    return login(client, "alex@example.com")


@pytest.fixture
def learner_headers(client):
    return login(client, "sam@example.com")
