"""Test configuration and fixtures."""

from __future__ import annotations

import pytest

from jira_to_pr.config import JiraSettings
from jira_to_pr.jira.client import Ticket

ENV_VARS = (
    "JIRA_BASE_URL",
    "JIRA_EMAIL",
    "JIRA_API_TOKEN",
    "JIRA_REQUEST_TIMEOUT_MS",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable the settings read."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings() -> JiraSettings:
    """Provide test connection settings."""
    return JiraSettings(
        _env_file=None,
        base_url="https://example.atlassian.net",
        email="dev@example.com",
        api_token="secret-token",
    )


@pytest.fixture
def full_ticket() -> Ticket:
    return Ticket(
        id="10001",
        key="PROJ-1",
        summary="Add login page",
        status="To Do",
        priority="High",
        description="Users need a way to sign in.",
        assignee="Ada Lovelace",
    )


@pytest.fixture
def bare_ticket() -> Ticket:
    return Ticket(
        id="10002",
        key="PROJ-2",
        summary="Fix typo",
        status="In Progress",
        priority="Low",
    )
