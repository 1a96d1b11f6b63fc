"""Shared pytest configuration."""

from typing import Any

import pytest

from redmine_cli.redmine.client import RedmineClient

BASE_URL = "https://redmine.example.com"


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly requested."""
    if not config.getoption("-m", default=None) or "integration" not in config.getoption("-m", default=""):
        skip_integration = pytest.mark.skip(reason="use -m integration to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def isolated_env(request, monkeypatch, tmp_path):
    """Keep unit tests away from the developer's REDMINE_* variables and .env file."""
    if "integration" in request.keywords:
        return
    for name in ("REDMINE_URL", "REDMINE_API_KEY", "REDMINE_TIMEOUT", "REDMINE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def client():
    c = RedmineClient(base_url=BASE_URL, api_key="secret-key")
    yield c
    c.close()


@pytest.fixture
def make_issue():
    """Factory for issue JSON as Redmine returns it."""

    def _make(**overrides: Any) -> dict[str, Any]:
        data = {
            "id": 42,
            "project": {"id": 1, "name": "Demo"},
            "tracker": {"id": 1, "name": "Bug"},
            "status": {"id": 1, "name": "New"},
            "priority": {"id": 2, "name": "Normal"},
            "author": {"id": 5, "name": "Alice"},
            "subject": "Bug",
            "description": "",
            "done_ratio": 0,
            "created_on": "2024-01-01T00:00:00Z",
            "updated_on": "2024-01-02T00:00:00Z",
        }
        data.update(overrides)
        return data

    return _make
