"""Jira REST API access."""

from jira_to_pr.jira.client import DEFAULT_JQL, JiraClient, Ticket

__all__ = ["DEFAULT_JQL", "JiraClient", "Ticket"]
