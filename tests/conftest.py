import os
import uuid

# Tests never talk to OpenAI or Supabase
os.environ["ENVIRONMENT"] = "dev"
os.environ["OPENAI_API_KEY"] = ""
os.environ["OFFLINE_MODE"] = "true"
os.environ["FOCUS_STORE_BACKEND"] = "memory"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from ember.main import app
from ember.services.content.generator import SuggestionGenerator
from ember.services.focus.engine import FocusSessionEngine
from ember.services.focus.store import InMemorySessionStore
from tests.fakes import FakeGenerator


@pytest.fixture
def store():
    return InMemorySessionStore(ttl_seconds=3600, max_records=100)


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def engine(store, fake_generator):
    return FocusSessionEngine(store=store, generator=fake_generator)


@pytest.fixture
def offline_engine(store):
    return FocusSessionEngine(store=store, generator=SuggestionGenerator())


@pytest.fixture
def client():
    """Test client with a fresh application state per test"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def base_url():
    return "http://testserver/api"


@pytest.fixture
def session_headers():
    return {"X-Session-Id": str(uuid.uuid4())}
