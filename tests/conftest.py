import pytest

from memory.models import build_skills


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    db_path = str(tmp_path / "test_skill_arena.db")
    monkeypatch.setattr("memory.store.DB_PATH", db_path)
    from memory.store import init_db
    init_db()
    return db_path


@pytest.fixture
def analyst_skills():
    return build_skills({
        "Logic": 240,
        "Problem-Solving": 120,
        "Analytical Thinking": 80,
        "Research": 35,
    })


@pytest.fixture
def fresh_skills():
    return build_skills({})


class FakeInsightsClient:
    def __init__(self, insights=None, error=None):
        self.insights = insights or []
        self.error = error
        self.calls = []

    def generate_insights(self, skills, top_careers):
        self.calls.append((skills, top_careers))
        if self.error is not None:
            raise self.error
        return list(self.insights)


@pytest.fixture
def fake_client_factory():
    return FakeInsightsClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def completion_response():
    def _make(content, status_code=200):
        payload = {"choices": [{"message": {"role": "assistant", "content": content}}]}
        return FakeResponse(status_code=status_code, payload=payload, text=str(content))

    return _make
