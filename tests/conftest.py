import pytest

from moviechat.config import settings


@pytest.fixture(autouse=True)
def api_keys(monkeypatch):
    monkeypatch.setattr(settings, "TMDB_API_KEY", "tmdb-test-key")
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "openai-test-key")
