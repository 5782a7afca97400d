from __future__ import annotations

from pathlib import Path

import pytest

from forge_installer.config import DEFAULT_REPO_URL, Settings, get_settings, validate_settings
from forge_installer.errors import ConfigError


def test_env_overrides_are_loaded(claude_dir: Path) -> None:
    settings = get_settings()
    assert settings.claude_path == claude_dir
    assert settings.repo_url == "https://forge.test/main"
    assert settings.http_timeout_seconds == 5


def test_defaults_match_fixed_layout(monkeypatch) -> None:
    for name in ("FORGE_CLAUDE_DIR", "FORGE_REPO_URL", "FORGE_HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.claude_path == Path.home() / ".claude"
    assert settings.repo_url == DEFAULT_REPO_URL
    validate_settings(settings)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_rejects_non_http_repo_url(monkeypatch) -> None:
    monkeypatch.setenv("FORGE_REPO_URL", "file:///tmp/forge")
    with pytest.raises(ConfigError, match="FORGE_REPO_URL"):
        validate_settings(Settings())


def test_rejects_non_positive_timeout(monkeypatch) -> None:
    monkeypatch.setenv("FORGE_HTTP_TIMEOUT_SECONDS", "0")
    with pytest.raises(ConfigError, match="TIMEOUT"):
        validate_settings(Settings())


def test_json_logs_follows_app_env(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    assert Settings().json_logs is True
    monkeypatch.setenv("APP_ENV", "dev")
    assert Settings().json_logs is False
