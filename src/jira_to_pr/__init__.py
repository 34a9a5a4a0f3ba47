"""Jira to PR.

Fetch Jira tickets assigned to you, pick one interactively, and launch Claude Code
with a prompt describing the ticket:
- configuration loaded from the environment or `.env`
- structured logging
- read-only Jira REST calls
"""

__version__ = "1.0.0"

from jira_to_pr.config import JiraSettings, load_settings

__all__ = ["__version__", "JiraSettings", "load_settings"]
