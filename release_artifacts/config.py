from pathlib import Path
from typing import Any, List, Optional

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from release_artifacts.exceptions import ConfigurationError

DEFAULT_EXTRACT_COMMAND = ["unzip", "-o", "-q", "{archive}", "-d", "{destination}"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Credential for the artifact API, never logged
    public_artifacts_token: SecretStr

    # Repository hosting the workflow runs
    github_owner: str
    github_repo: str
    github_api_url: str = "https://api.github.com"
    http_timeout_seconds: float = 30.0

    # Run selection
    ci_commit_sha: str
    workflow_name: str = "Continuous Integration"

    # Polling
    workflow_timeout_seconds: float = 15 * 60
    poll_interval_seconds: float = 10.0

    # Release metadata (RELEASE_* override package.json)
    package_json_path: Path = Path("package.json")
    release_name: Optional[str] = None
    release_version: Optional[str] = None
    workspace_artifact_name: str = "workspace-packages"

    # Staging
    output_dir: Path = Path("dist")
    extract_command: List[str] = DEFAULT_EXTRACT_COMMAND

    # Export spans to the console
    trace_console: bool = False

    @field_validator("public_artifacts_token")
    @classmethod
    def token_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("PUBLIC_ARTIFACTS_TOKEN must not be empty")
        return value

    @field_validator("ci_commit_sha", "github_owner", "github_repo")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("workflow_timeout_seconds", "poll_interval_seconds")
    @classmethod
    def non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("extract_command")
    @classmethod
    def has_archive_placeholder(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("extract command must not be empty")
        if not any("{archive}" in part for part in value):
            raise ValueError("extract command must reference {archive}")
        return value

    @property
    def token(self) -> str:
        return self.public_artifacts_token.get_secret_value()


def load_settings(**overrides: Any) -> Settings:
    """
    Load settings from the environment and .env, applying explicit overrides.

    Overrides set to None are ignored so unset CLI flags fall through to the
    environment.

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**values)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "settings"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration ({fields}): {e}") from e
