#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates using the components directly, without the interactive picker:

* load settings from `.env`
* fetch one Jira issue by key
* print the Claude Code invocation for it (dry run)
"""

from __future__ import annotations

import argparse
import os
from typing import Sequence

from jira_to_pr.config import load_settings
from jira_to_pr.jira.client import JiraClient
from jira_to_pr.launcher import ClaudeLauncher
from jira_to_pr.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview the Claude Code prompt for an issue.")
    parser.add_argument("--issue", required=True, help='Issue key, e.g. "PROJ-123"')
    parser.add_argument("--project", default=os.getcwd(), help="Project path for Claude Code")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)

    jira = JiraClient(settings)
    try:
        ticket = jira.get_issue(args.issue)
    finally:
        jira.close()

    ClaudeLauncher().launch(ticket, args.project, dry_run=True).result()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
