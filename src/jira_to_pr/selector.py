"""Interactive ticket selection and prefixed console messages."""

from __future__ import annotations

import enum
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TextIO

from jira_to_pr.jira.client import Ticket

DESCRIPTION_PREVIEW_CHARS = 200


class SelectionDecision(enum.Enum):
    PROCEED = "proceed"
    CANCEL = "cancel"


@dataclass(frozen=True, slots=True)
class TaskSelection:
    """The ticket the user picked and what to do with it."""

    ticket: Ticket
    decision: SelectionDecision

    @property
    def proceed(self) -> bool:
        return self.decision is SelectionDecision.PROCEED


def ticket_label(ticket: Ticket) -> str:
    return f"{ticket.key}: {ticket.summary} [{ticket.status}]"


class TaskSelector:
    """Prompt the user to pick a ticket from a list and confirm it."""

    def __init__(
        self,
        *,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_func
        self._output = output

    @property
    def _out(self) -> TextIO:
        return self._output or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self._out)

    def _ask(self, text: str) -> str | None:
        """Read one answer; None on EOF or Ctrl-C."""
        try:
            return self._input(text).strip()
        except (EOFError, KeyboardInterrupt):
            self._print()
            return None

    def select_task(self, issues: Sequence[Ticket]) -> TaskSelection | None:
        """Let the user choose a ticket.

        Returns None when there is nothing to choose from.
        """

        if not issues:
            self._print("📭 No issues found.")
            return None

        self._print(f"\n🎯 Found {len(issues)} issue(s):\n")
        for number, ticket in enumerate(issues, 1):
            self._print(f"  {number:>2}. {ticket_label(ticket)}")
        cancel_number = len(issues) + 1
        self._print(f"  {cancel_number:>2}. ❌ Cancel")
        self._print()

        index = self._choose_index(len(issues))
        if index is None:
            # Cancelling still references the first ticket in the list.
            return TaskSelection(ticket=issues[0], decision=SelectionDecision.CANCEL)

        ticket = issues[index]
        self._show_details(ticket)

        decision = SelectionDecision.PROCEED if self._confirm() else SelectionDecision.CANCEL
        return TaskSelection(ticket=ticket, decision=decision)

    def _choose_index(self, count: int) -> int | None:
        """Return a 0-based ticket index, or None for cancel."""
        while True:
            raw = self._ask(f"Select a task to implement [1-{count + 1}]: ")
            if raw is None:
                return None
            try:
                number = int(raw)
            except ValueError:
                number = 0
            if 1 <= number <= count:
                return number - 1
            if number == count + 1:
                return None
            self._print(f"  Enter a number between 1 and {count + 1}.")

    def _show_details(self, ticket: Ticket) -> None:
        self._print(f"\n📋 Selected: {ticket.key}")
        self._print(f"📝 Summary: {ticket.summary}")
        if ticket.description:
            preview = ticket.description[:DESCRIPTION_PREVIEW_CHARS]
            self._print(f"📖 Description: {preview}...")
        self._print(f"📊 Status: {ticket.status}")
        self._print(f"⚡ Priority: {ticket.priority}\n")

    def _confirm(self) -> bool:
        while True:
            raw = self._ask("Proceed with this task? (Y/n): ")
            if raw is None:
                return False
            answer = raw.lower()
            if not answer or answer.startswith("y"):
                return True
            if answer.startswith("n"):
                return False
            self._print("  Please answer y or n.")


def display_error(message: str, *, stream: TextIO | None = None) -> None:
    print(f"❌ Error: {message}", file=stream or sys.stderr)


def display_success(message: str, *, stream: TextIO | None = None) -> None:
    print(f"✅ {message}", file=stream or sys.stdout)


def display_info(message: str, *, stream: TextIO | None = None) -> None:
    print(f"ℹ️  {message}", file=stream or sys.stdout)
