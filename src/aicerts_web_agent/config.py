"""Configuration management for the web agent CLI."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Region = Literal["us-west-2", "us-east-1", "eu-central-1", "ap-southeast-1"]
REGIONS: tuple[str, ...] = get_args(Region)

DEFAULT_REGION: Region = "ap-southeast-1"
DEFAULT_MODEL = "google/gemini-2.5-pro"
DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_SYSTEM_PROMPT = "You're a helpful assistant that can control a web browser."

# env key -> (settings field, CLI flag)
_SECRETS: dict[str, tuple[str, str]] = {
    "BROWSERBASE_API_KEY": ("browserbase_api_key", "--bb-api-key"),
    "BROWSERBASE_PROJECT_ID": ("browserbase_project_id", "--bb-project-id"),
    "MODEL_API_KEY": ("model_api_key", "--model-api-key"),
}


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or an option is invalid."""


class AgentSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=("settings_",),
    )

    browserbase_api_key: str | None = Field(default=None, validation_alias="BROWSERBASE_API_KEY")
    browserbase_project_id: str | None = Field(
        default=None, validation_alias="BROWSERBASE_PROJECT_ID"
    )
    model_api_key: str | None = Field(default=None, validation_alias="MODEL_API_KEY")
    log_level: str = Field(default="INFO", validation_alias="AICERTS_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "AICERTS_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> AgentSettings:
    """Return cached settings instance."""

    return AgentSettings()


class CLIOptions(BaseModel):
    """Options for a single agent invocation, as parsed from the command line."""

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    region: Region = DEFAULT_REGION
    bb_api_key: str | None = None
    bb_project_id: str | None = None
    model_api_key: str | None = None
    model: str = DEFAULT_MODEL
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> "CLIOptions":
        try:
            return cls.model_validate(vars(namespace))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid options: {exc}") from exc


@dataclass(slots=True, frozen=True)
class ResolvedSecrets:
    api_key: str
    project_id: str
    model_api_key: str


def resolve_required(
    cli_value: str | None,
    env_key: str,
    settings: AgentSettings | None = None,
) -> str:
    """Return the CLI value, falling back to the environment.

    Empty strings count as missing. Raises ``ConfigurationError`` naming both
    the flag and the environment variable when neither source has a value.
    """

    if cli_value:
        return cli_value

    field_name, flag = _SECRETS.get(env_key, (None, "--" + env_key.lower().replace("_", "-")))
    if field_name is not None:
        value = getattr(settings or get_settings(), field_name)
    else:
        value = os.environ.get(env_key)

    if not value:
        raise ConfigurationError(f"Missing required config: provide {flag} or set {env_key}")
    return value


def resolve_secrets(options: CLIOptions, settings: AgentSettings | None = None) -> ResolvedSecrets:
    """Resolve the platform key, project id and model key, in that order."""

    settings = settings or get_settings()
    return ResolvedSecrets(
        api_key=resolve_required(options.bb_api_key, "BROWSERBASE_API_KEY", settings),
        project_id=resolve_required(options.bb_project_id, "BROWSERBASE_PROJECT_ID", settings),
        model_api_key=resolve_required(options.model_api_key, "MODEL_API_KEY", settings),
    )


__all__ = [
    "AgentSettings",
    "CLIOptions",
    "ConfigurationError",
    "DEFAULT_MODEL",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_REGION",
    "DEFAULT_SYSTEM_PROMPT",
    "REGIONS",
    "Region",
    "ResolvedSecrets",
    "get_settings",
    "resolve_required",
    "resolve_secrets",
]
