import pytest
from fastapi.testclient import TestClient

from app.services.supabase_client import ExperienceStore
from tests.fakes import FakeSupabase


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase):
    return ExperienceStore(fake_supabase)


@pytest.fixture
def client(store):
    from app.main import app

    app.state.experience_store = store
    app.state.chat_controller = None
    with TestClient(app) as c:
        yield c
    app.state.experience_store = None
    app.state.chat_controller = None
