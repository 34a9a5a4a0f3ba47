"""Build the Claude Code prompt for a ticket and start Claude Code.

The launch is non-blocking: `ClaudeLauncher.launch` returns a `Future` that a
watcher thread resolves once the process exits, so callers decide whether to wait.
"""

from __future__ import annotations

import logging
import subprocess
import sys
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from jira_to_pr.jira.client import Ticket

logger = logging.getLogger(__name__)

CLAUDE_COMMAND = "claude"
INSTALL_URL = "https://claude.ai/code"
PROMPT_PREVIEW_CHARS = 100
DIVIDER_WIDTH = 60


@dataclass(frozen=True, slots=True)
class LaunchOutcome:
    """What happened to a launch request."""

    started: bool
    exit_code: int | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.started and self.exit_code == 0


def build_prompt(ticket: Ticket) -> str:
    """Describe the ticket as an implementation task for Claude Code."""

    parts = [
        f"Implement the following Jira ticket: {ticket.key}",
        "",
        f"**Title:** {ticket.summary}",
        "",
    ]

    if ticket.description:
        parts.append("**Description:**")
        parts.append(ticket.description)
        parts.append("")

    parts.append(f"**Status:** {ticket.status}")
    parts.append(f"**Priority:** {ticket.priority}")

    if ticket.assignee:
        parts.append(f"**Assignee:** {ticket.assignee}")

    parts.append("")
    parts.append(
        "Please analyze the codebase and implement this feature according to the requirements."
    )
    return "\n".join(parts)


class ClaudeLauncher:
    """Start Claude Code for a ticket, or print what would be started."""

    def __init__(
        self,
        *,
        command: str = CLAUDE_COMMAND,
        popen: Callable[..., Any] = subprocess.Popen,
        output: TextIO | None = None,
        error_output: TextIO | None = None,
    ) -> None:
        self._command = command
        self._popen = popen
        self._output = output
        self._error_output = error_output

    def _print(self, text: str = "") -> None:
        print(text, file=self._output or sys.stdout)

    def _print_error(self, text: str) -> None:
        print(text, file=self._error_output or sys.stderr)

    def launch(
        self,
        ticket: Ticket,
        project_path: str | Path,
        *,
        dry_run: bool = False,
    ) -> Future[LaunchOutcome]:
        prompt = build_prompt(ticket)
        future: Future[LaunchOutcome] = Future()

        if dry_run:
            self._print_dry_run(ticket, str(project_path), prompt)
            future.set_result(LaunchOutcome(started=False))
            return future

        self._print(f"🚀 Launching Claude Code for {ticket.key}...")
        self._print(f"📁 Project path: {project_path}")
        self._print(f"💬 Prompt: {prompt[:PROMPT_PREVIEW_CHARS]}...\n")

        try:
            # stdin/stdout/stderr are inherited; Claude Code owns the terminal.
            process = self._popen([self._command, prompt], cwd=str(project_path))
        except OSError as e:
            logger.warning(
                "Failed to start Claude Code",
                extra={"command": self._command, "error": str(e)},
            )
            self._print_error(f"❌ Failed to launch Claude Code: {e}")
            self._print("💡 Make sure Claude Code is installed and available in your PATH")
            self._print(f"🔗 Install from: {INSTALL_URL}")
            future.set_result(LaunchOutcome(started=False, error=str(e)))
            return future

        logger.info(
            "Claude Code started",
            extra={"issue_key": ticket.key, "pid": getattr(process, "pid", None)},
        )
        watcher = threading.Thread(
            target=self._watch,
            args=(process, ticket, future),
            name=f"claude-{ticket.key}",
            daemon=True,
        )
        watcher.start()
        return future

    def _watch(self, process: Any, ticket: Ticket, future: Future[LaunchOutcome]) -> None:
        try:
            code = process.wait()
        except Exception as e:
            future.set_exception(e)
            return

        if code == 0:
            self._print(f"✅ Claude Code session completed for {ticket.key}")
        else:
            self._print(f"⚠️  Claude Code exited with code {code}")
        logger.info("Claude Code exited", extra={"issue_key": ticket.key, "exit_code": code})
        future.set_result(LaunchOutcome(started=True, exit_code=code))

    def _print_dry_run(self, ticket: Ticket, project_path: str, prompt: str) -> None:
        self._print("\n🧪 DRY RUN MODE - Claude Code would be launched with:")
        self._print("=" * DIVIDER_WIDTH)
        self._print(f"Command: {self._command}")
        self._print(f"Working Directory: {project_path}")
        self._print(f"Issue: {ticket.key}")
        self._print(f"Title: {ticket.summary}")
        self._print("=" * DIVIDER_WIDTH)
        self._print("Prompt:")
        self._print("-" * DIVIDER_WIDTH)
        self._print(prompt)
        self._print("-" * DIVIDER_WIDTH)
        self._print("\n💡 To actually launch Claude Code, run without --dry-run option")
