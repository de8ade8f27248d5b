from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from formsmith.models.forms import Form, FormResponse
from formsmith.models.questions import Question
from formsmith.storage import JsonFileStore


# --- Canned forms ---

SAMPLE_QUESTIONS = [
    Question(id="q1", type="short_text", title="Name", required=True, placeholder="Your name"),
    Question(id="q2", type="number", title="Age", required=False),
    Question(id="q3", type="checkbox", title="Toppings", required=True, options=["Cheese", "Ham"]),
]

SAMPLE_FORM = Form(
    id="form123",
    title="Pizza survey",
    description="Tell us what you like",
    questions=SAMPLE_QUESTIONS,
    published=True,
    user_id="user-1",
    created_at=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
    updated_at=datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc),
)

SAMPLE_RESPONSE = FormResponse(
    id="resp1",
    form_id="form123",
    answers=["Alice", "30", ["Cheese"]],
    created_at=datetime(2025, 1, 3, 9, 30, tzinfo=timezone.utc),
)


@pytest.fixture
def store(tmp_path):
    """JSON-file store in a temp dir."""
    return JsonFileStore(tmp_path / "data.json")


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from formsmith.main import api
    return TestClient(api)


@pytest.fixture
def authed_client(api_client):
    """TestClient whose requests are treated as coming from user-1."""
    from formsmith.auth import get_current_user
    from formsmith.main import api

    api.dependency_overrides[get_current_user] = lambda: "user-1"
    yield api_client
    api.dependency_overrides.clear()
