from __future__ import annotations

from pathlib import Path

import pytest

from aicerts_web_agent.config import get_settings

_ENV_KEYS = (
    "BROWSERBASE_API_KEY",
    "BROWSERBASE_PROJECT_ID",
    "MODEL_API_KEY",
    "AICERTS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep any developer .env out of the settings
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def secrets_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BROWSERBASE_API_KEY", "bb-key")
    monkeypatch.setenv("BROWSERBASE_PROJECT_ID", "bb-project")
    monkeypatch.setenv("MODEL_API_KEY", "model-key")
