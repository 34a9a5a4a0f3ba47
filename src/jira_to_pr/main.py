"""CLI entrypoint: fetch Jira tickets, pick one, launch Claude Code."""

from __future__ import annotations

import argparse
import logging
import os
from concurrent.futures import Future

from jira_to_pr import __version__
from jira_to_pr.config import load_settings
from jira_to_pr.errors import ConfigurationError
from jira_to_pr.jira.client import DEFAULT_JQL, JiraClient
from jira_to_pr.launcher import ClaudeLauncher, LaunchOutcome
from jira_to_pr.logging import configure_logging
from jira_to_pr.selector import TaskSelector, display_error, display_info

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jira-to-pr",
        description="Fetch Jira tickets and launch Claude Code for implementation",
    )
    parser.add_argument("--version", action="version", version=f"jira-to-pr {__version__}")
    parser.add_argument(
        "-j",
        "--jql",
        default=None,
        help=f"Custom JQL query for filtering issues (default: '{DEFAULT_JQL}')",
    )
    parser.add_argument(
        "-i",
        "--issue",
        default=None,
        help="Fetch a single issue by key (e.g. PROJ-123) instead of searching",
    )
    parser.add_argument(
        "-p",
        "--project",
        default=os.getcwd(),
        help="Project path for Claude Code (defaults to the current directory)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be executed without actually launching Claude Code",
    )
    return parser


def _wait_for_exit(outcome: Future[LaunchOutcome]) -> LaunchOutcome:
    """Block until Claude Code exits.

    Claude Code shares our terminal and process group, so Ctrl-C reaches us too.
    It handles the interrupt itself; we keep waiting for it to exit.
    """

    while True:
        try:
            return outcome.result()
        except KeyboardInterrupt:
            logger.info("Interrupt received while Claude Code is running; still waiting")


def main(
    argv: list[str] | None = None,
    *,
    selector: TaskSelector | None = None,
    launcher: ClaudeLauncher | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        display_info("Loading configuration...")
        settings = load_settings()
    except ConfigurationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        display_error(str(e))
        return 1

    configure_logging(settings.log_level)

    try:
        display_info("Connecting to Jira...")
        jira = JiraClient(settings)
        try:
            display_info("Fetching issues...")
            if args.issue:
                issues = [jira.get_issue(args.issue)]
            else:
                issues = jira.search_issues(args.jql)
        finally:
            jira.close()

        selection = (selector or TaskSelector()).select_task(issues)
        if selection is None or not selection.proceed:
            display_info("Operation cancelled.")
            return 0

        outcome = (launcher or ClaudeLauncher()).launch(
            selection.ticket, args.project, dry_run=args.dry_run
        )
        _wait_for_exit(outcome)
        return 0

    except Exception as e:
        logger.exception("Command failed")
        display_error(str(e) or "Unknown error occurred")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
