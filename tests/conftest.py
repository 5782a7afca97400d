import logging
from pathlib import Path

import pytest

from forge_installer.config import get_settings


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch):
    claude_dir = tmp_path / "claude"
    monkeypatch.setenv("FORGE_CLAUDE_DIR", str(claude_dir))
    monkeypatch.setenv("FORGE_REPO_URL", "https://forge.test/main")
    monkeypatch.setenv("FORGE_HTTP_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("APP_ENV", "dev")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logging.getLogger().handlers.clear()


@pytest.fixture
def claude_dir(tmp_path: Path) -> Path:
    return tmp_path / "claude"
