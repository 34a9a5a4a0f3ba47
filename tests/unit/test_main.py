"""Unit tests for the CLI entrypoint (Jira and process mocked)."""

from __future__ import annotations

import os
from concurrent.futures import Future
from pathlib import Path
from unittest.mock import Mock

import pytest

from jira_to_pr import main as main_module
from jira_to_pr.errors import HttpStatusError
from jira_to_pr.jira.client import JiraClient, Ticket
from jira_to_pr.launcher import ClaudeLauncher, LaunchOutcome
from jira_to_pr.main import build_parser, main
from jira_to_pr.selector import SelectionDecision, TaskSelection, TaskSelector


@pytest.fixture
def configured_env(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    clean_env.chdir(tmp_path)
    clean_env.setenv("JIRA_BASE_URL", "https://example.atlassian.net")
    clean_env.setenv("JIRA_EMAIL", "dev@example.com")
    clean_env.setenv("JIRA_API_TOKEN", "secret-token")
    # Keep the root logger untouched by the CLI.
    clean_env.setattr(main_module, "configure_logging", lambda level: None)
    return clean_env


@pytest.fixture
def mock_jira(configured_env: pytest.MonkeyPatch) -> Mock:
    jira = Mock(spec=JiraClient)
    configured_env.setattr(main_module, "JiraClient", Mock(return_value=jira))
    return jira


def _resolved(outcome: LaunchOutcome) -> Future[LaunchOutcome]:
    future: Future[LaunchOutcome] = Future()
    future.set_result(outcome)
    return future


def test_parser_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    args = build_parser().parse_args([])

    assert args.jql is None
    assert args.issue is None
    assert args.project == os.getcwd()
    assert args.dry_run is False


def test_missing_configuration_exits_1(
    tmp_path: Path, clean_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    clean_env.chdir(tmp_path)
    jira_cls = Mock()
    clean_env.setattr(main_module, "JiraClient", jira_cls)

    assert main([]) == 1

    err = capsys.readouterr().err
    assert "JIRA_BASE_URL" in err and "JIRA_EMAIL" in err and "JIRA_API_TOKEN" in err
    jira_cls.assert_not_called()


def test_selected_ticket_is_launched(mock_jira: Mock, full_ticket: Ticket) -> None:
    mock_jira.search_issues.return_value = [full_ticket]
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = TaskSelection(full_ticket, SelectionDecision.PROCEED)
    launcher = Mock(spec=ClaudeLauncher)
    launcher.launch.return_value = _resolved(LaunchOutcome(started=True, exit_code=0))

    code = main(
        ["--jql", "project = WEB", "--project", "/work/repo", "--dry-run"],
        selector=selector,
        launcher=launcher,
    )

    assert code == 0
    mock_jira.search_issues.assert_called_once_with("project = WEB")
    selector.select_task.assert_called_once_with([full_ticket])
    launcher.launch.assert_called_once_with(full_ticket, "/work/repo", dry_run=True)
    mock_jira.close.assert_called_once_with()


def test_default_query_is_used(mock_jira: Mock) -> None:
    mock_jira.search_issues.return_value = []
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = None
    launcher = Mock(spec=ClaudeLauncher)

    assert main([], selector=selector, launcher=launcher) == 0

    mock_jira.search_issues.assert_called_once_with(None)
    launcher.launch.assert_not_called()


def test_issue_option_fetches_single_ticket(mock_jira: Mock, bare_ticket: Ticket) -> None:
    mock_jira.get_issue.return_value = bare_ticket
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = TaskSelection(bare_ticket, SelectionDecision.CANCEL)
    launcher = Mock(spec=ClaudeLauncher)

    assert main(["--issue", "PROJ-2"], selector=selector, launcher=launcher) == 0

    mock_jira.get_issue.assert_called_once_with("PROJ-2")
    mock_jira.search_issues.assert_not_called()
    selector.select_task.assert_called_once_with([bare_ticket])
    launcher.launch.assert_not_called()


def test_cancellation_exits_0(
    mock_jira: Mock, full_ticket: Ticket, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_jira.search_issues.return_value = [full_ticket]
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = TaskSelection(full_ticket, SelectionDecision.CANCEL)
    launcher = Mock(spec=ClaudeLauncher)

    assert main([], selector=selector, launcher=launcher) == 0

    assert "Operation cancelled." in capsys.readouterr().out
    launcher.launch.assert_not_called()


def test_http_error_exits_1(mock_jira: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    mock_jira.search_issues.side_effect = HttpStatusError(401, "Unauthorized")
    selector = Mock(spec=TaskSelector)

    assert main([], selector=selector, launcher=Mock(spec=ClaudeLauncher)) == 1

    assert "❌ Error: HTTP 401: Unauthorized" in capsys.readouterr().err
    selector.select_task.assert_not_called()
    mock_jira.close.assert_called_once_with()


def test_spawn_failure_still_exits_0(mock_jira: Mock, full_ticket: Ticket) -> None:
    mock_jira.search_issues.return_value = [full_ticket]
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = TaskSelection(full_ticket, SelectionDecision.PROCEED)
    launcher = Mock(spec=ClaudeLauncher)
    launcher.launch.return_value = _resolved(LaunchOutcome(started=False, error="not found"))

    assert main([], selector=selector, launcher=launcher) == 0


def test_explicit_empty_jql_is_passed_through(mock_jira: Mock) -> None:
    mock_jira.search_issues.return_value = []
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = None

    assert main(["--jql", ""], selector=selector, launcher=Mock(spec=ClaudeLauncher)) == 0

    mock_jira.search_issues.assert_called_once_with("")


def test_unknown_log_level_is_reported_not_raised(
    configured_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    configured_env.setenv("LOG_LEVEL", "verbose")

    assert main(["--dry-run"]) == 1

    err = capsys.readouterr().err
    assert err.startswith("❌ Error: ")
    assert "LOG_LEVEL" in err


def test_ctrl_c_while_claude_runs_keeps_waiting(mock_jira: Mock, full_ticket: Ticket) -> None:
    mock_jira.search_issues.return_value = [full_ticket]
    selector = Mock(spec=TaskSelector)
    selector.select_task.return_value = TaskSelection(full_ticket, SelectionDecision.PROCEED)
    outcome = Mock(spec=Future)
    outcome.result.side_effect = [
        KeyboardInterrupt(),
        LaunchOutcome(started=True, exit_code=130),
    ]
    launcher = Mock(spec=ClaudeLauncher)
    launcher.launch.return_value = outcome

    assert main([], selector=selector, launcher=launcher) == 0

    assert outcome.result.call_count == 2
