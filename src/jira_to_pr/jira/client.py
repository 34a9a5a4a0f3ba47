"""Read-only Jira REST API client.

Only the two calls the CLI needs: a JQL search and a single-issue lookup.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

from jira_to_pr.config import JiraSettings
from jira_to_pr.http_client import HttpClient

logger = logging.getLogger(__name__)

DEFAULT_JQL = "assignee = currentUser() AND status != Done"
ISSUE_FIELDS: tuple[str, ...] = ("summary", "description", "status", "assignee", "priority")
MAX_RESULTS = 50

# ADF block nodes that end a line when flattened to text.
_ADF_BLOCK_TYPES = {
    "paragraph",
    "heading",
    "blockquote",
    "codeBlock",
    "listItem",
    "rule",
    "panel",
}


@dataclass(frozen=True, slots=True)
class Ticket:
    """A Jira issue reduced to the fields used for selection and prompting."""

    id: str
    key: str
    summary: str
    status: str
    priority: str
    description: str | None = None
    assignee: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Ticket:
        fields: dict[str, Any] = data.get("fields") or {}

        status = fields.get("status") or {}
        priority = fields.get("priority") or {}
        assignee = fields.get("assignee")

        assignee_name = None
        if isinstance(assignee, dict):
            name = assignee.get("displayName")
            if isinstance(name, str) and name.strip():
                assignee_name = name

        return cls(
            id=str(data.get("id", "")),
            key=str(data.get("key", "")),
            summary=str(fields.get("summary") or ""),
            status=str(status.get("name") or "Unknown"),
            # Priority can be disabled per project; keep the field populated.
            priority=str(priority.get("name") or "None"),
            description=_description_text(fields.get("description")),
            assignee=assignee_name,
        )


def _description_text(value: object) -> str | None:
    if isinstance(value, str):
        text = value
    elif isinstance(value, dict):
        text = adf_to_text(value)
    else:
        return None
    return text if text.strip() else None


def adf_to_text(node: dict[str, Any]) -> str:
    """Flatten an Atlassian Document Format node to plain text."""

    parts: list[str] = []
    _collect_adf_text(node, parts)
    return "".join(parts).strip("\n")


def _collect_adf_text(node: dict[str, Any], parts: list[str]) -> None:
    node_type = node.get("type")
    if node_type == "text":
        parts.append(str(node.get("text", "")))
        return
    if node_type == "hardBreak":
        parts.append("\n")
        return

    for child in node.get("content") or []:
        if isinstance(child, dict):
            _collect_adf_text(child, parts)

    if node_type in _ADF_BLOCK_TYPES and parts and not parts[-1].endswith("\n"):
        parts.append("\n")


class JiraClient:
    """Jira REST API v3 client authenticated with email + API token."""

    def __init__(self, settings: JiraSettings, *, http: HttpClient | None = None) -> None:
        self._base_url = settings.base_url.rstrip("/")

        credentials = f"{settings.email}:{settings.api_token}".encode("utf-8")
        auth_header = base64.b64encode(credentials).decode("ascii")

        self._http = http or HttpClient(
            headers={
                "Authorization": f"Basic {auth_header}",
                "Accept": "application/json",
            },
            timeout_ms=settings.request_timeout_ms,
        )

    def _api_url(self, path: str, params: dict[str, str]) -> str:
        path = path.lstrip("/")
        return f"{self._base_url}/rest/api/3/{path}?{urlencode(params)}"

    def search_issues(self, jql: str | None = None) -> list[Ticket]:
        """Search issues with JQL, returning at most `MAX_RESULTS` tickets."""

        query = jql if jql is not None else DEFAULT_JQL
        url = self._api_url(
            "search",
            {
                "jql": query,
                "fields": ",".join(ISSUE_FIELDS),
                "maxResults": str(MAX_RESULTS),
            },
        )
        data: dict[str, Any] = self._http.get(url)

        issues = data.get("issues") or []
        tickets = [Ticket.from_api(item) for item in issues if isinstance(item, dict)]
        logger.info(
            "Fetched issues",
            extra={"jql": query, "count": len(tickets), "total": data.get("total")},
        )
        return tickets

    def get_issue(self, issue_key: str) -> Ticket:
        """Fetch a single issue by key (e.g. `PROJ-123`)."""

        if not issue_key.strip():
            raise ValueError("issue_key is required")
        url = self._api_url(
            f"issue/{quote(issue_key, safe='')}",
            {"fields": ",".join(ISSUE_FIELDS)},
        )
        data: dict[str, Any] = self._http.get(url)
        return Ticket.from_api(data)

    def close(self) -> None:
        self._http.close()
