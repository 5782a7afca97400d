"""Installer configuration contract."""

from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from forge_installer.errors import ConfigError

DEFAULT_REPO_URL = "https://raw.githubusercontent.com/agentik-os/forge/main"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="WARNING")
    claude_dir: str = Field(alias="FORGE_CLAUDE_DIR", default="~/.claude")
    repo_url: str = Field(alias="FORGE_REPO_URL", default=DEFAULT_REPO_URL)
    http_timeout_seconds: float = Field(alias="FORGE_HTTP_TIMEOUT_SECONDS", default=30.0)
    user_agent: str = Field(alias="FORGE_USER_AGENT", default="forge-installer/3.0")

    @property
    def claude_path(self) -> Path:
        return Path(self.claude_dir).expanduser()

    @property
    def json_logs(self) -> bool:
        return self.app_env == "prod"


def validate_settings(settings: Settings) -> None:
    parsed = urlparse(settings.repo_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigError(f"FORGE_REPO_URL must be an http(s) URL, got {settings.repo_url!r}")
    if settings.http_timeout_seconds <= 0:
        raise ConfigError("FORGE_HTTP_TIMEOUT_SECONDS must be > 0")
    if not settings.claude_dir.strip():
        raise ConfigError("FORGE_CLAUDE_DIR must not be empty")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
