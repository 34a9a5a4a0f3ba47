"""Configuration for the Jira connection.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The three connection values are validated together so a single error names every
missing variable.
"""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jira_to_pr.errors import ConfigurationError

# Environment variable name -> example shown when it is missing.
REQUIRED_VARIABLES: dict[str, str] = {
    "JIRA_BASE_URL": "e.g., https://yourcompany.atlassian.net",
    "JIRA_EMAIL": "your Jira email",
    "JIRA_API_TOKEN": "your Jira API token",
}


class JiraSettings(BaseSettings):
    """Connection settings for Jira.

    Environment variables:
    - JIRA_BASE_URL
    - JIRA_EMAIL
    - JIRA_API_TOKEN
    - JIRA_REQUEST_TIMEOUT_MS (optional)
    - LOG_LEVEL               (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `JiraSettings(_env_file=None)`.
    """

    # Defaults are empty so that the validator below can report every missing
    # variable at once instead of failing on the first one.
    base_url: str = Field(
        default="",
        validation_alias="JIRA_BASE_URL",
        description="Jira site URL, e.g. https://yourcompany.atlassian.net",
    )
    email: str = Field(
        default="",
        validation_alias="JIRA_EMAIL",
        description="Email of the Jira account used for Basic auth",
    )
    api_token: str = Field(
        default="",
        validation_alias="JIRA_API_TOKEN",
        description="Jira API token used for Basic auth",
    )

    request_timeout_ms: int = Field(
        default=30_000,
        gt=0,
        validation_alias="JIRA_REQUEST_TIMEOUT_MS",
        description="Timeout applied to every Jira request, in milliseconds",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        if value.upper() not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return value

    @model_validator(mode="after")
    def _require_connection_values(self) -> JiraSettings:
        values = {
            "JIRA_BASE_URL": self.base_url,
            "JIRA_EMAIL": self.email,
            "JIRA_API_TOKEN": self.api_token,
        }
        missing = [name for name, value in values.items() if not value.strip()]
        if missing:
            raise ConfigurationError(_missing_message(missing), missing=missing)
        return self


def _missing_message(missing: list[str]) -> str:
    lines = ["Missing required environment variables. Please set:"]
    lines.extend(f"- {name} ({REQUIRED_VARIABLES[name]})" for name in missing)
    return "\n".join(lines)


def load_settings(env_file: str | None = ".env") -> JiraSettings:
    """Load settings from the environment and `env_file`.

    Raises:
        ConfigurationError: if any required value is missing or invalid.
    """

    try:
        return JiraSettings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as e:
        for error in e.errors():
            cause = error.get("ctx", {}).get("error")
            if isinstance(cause, ConfigurationError):
                raise cause from e
        raise ConfigurationError(f"Invalid configuration:\n{e}") from e
