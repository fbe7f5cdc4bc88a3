import pytest
from fastapi.testclient import TestClient

from src.api.deps import reset_dependencies
from src.api.main import app

RULES = """
owner:
  allowed_redirect_origins:
    - http://localhost:3000
live_sync:
  debounce_seconds: 0.02
"""


@pytest.fixture
def api_env(tmp_path, monkeypatch):
    """Point the app at a fresh data directory and rules file."""
    rules_path = tmp_path / "rules.yaml"
    rules_path.write_text(RULES)
    monkeypatch.setenv("FOLIO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("FOLIO_RULES_PATH", str(rules_path))
    monkeypatch.setenv("FOLIO_SECRET_KEY", "api-test-secret")
    monkeypatch.delenv("FOLIO_BOOTSTRAP_EMAIL", raising=False)
    monkeypatch.delenv("FOLIO_BOOTSTRAP_PASSWORD", raising=False)
    reset_dependencies()
    yield tmp_path
    app.dependency_overrides.clear()
    reset_dependencies()


@pytest.fixture
def client(api_env):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def owner_client(client):
    """A client whose cookie jar holds the owner session."""
    resp = client.post(
        "/api/auth/signup",
        json={"email": "owner@example.com", "password": "correct-horse-battery"},
    )
    assert resp.status_code == 201
    return client
