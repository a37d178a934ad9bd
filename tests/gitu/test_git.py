from pathlib import Path
from unittest.mock import patch

import pytest

import gitu.exec as exec_util
import gitu.git as git
from tests.gitu.helpers import FakeGitRunner, failed, ok, timed_out


def _install(monkeypatch: pytest.MonkeyPatch, runner: FakeGitRunner) -> FakeGitRunner:
    monkeypatch.setattr(exec_util, "_DEFAULT_COMMAND_RUNNER", runner)
    return runner


def test_run_git_scopes_command_and_trims_trailing_whitespace(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    runner = _install(monkeypatch, FakeGitRunner(lambda _repo, _args: ok(stdout="master\n\n")))

    value = git.run_git(Path("/src/demo"), ["rev-parse", "--abbrev-ref", "HEAD"])

    assert value == "master"
    request = runner.requests[0]
    assert request.argv == ("git", "-C", "/src/demo", "rev-parse", "--abbrev-ref", "HEAD")
    assert request.timeout_seconds == git.DEFAULT_TIMEOUT_SECONDS
    assert request.env is not None
    assert request.env["LC_ALL"] == "C"
    assert request.env["GIT_TERMINAL_PROMPT"] == "0"


def test_run_git_uses_configured_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = _install(monkeypatch, FakeGitRunner(lambda _repo, _args: ok()))

    git.run_git(Path("/src/demo"), ["status"], git_path="/opt/git/bin/git", timeout_seconds=2)

    assert runner.requests[0].argv[0] == "/opt/git/bin/git"
    assert runner.requests[0].timeout_seconds == 2


@pytest.mark.parametrize(
    "result",
    [
        failed(stderr="fatal: not a git repository"),
        timed_out(),
        None,
    ],
)
def test_run_git_reduces_failures_to_empty_output(
    monkeypatch: pytest.MonkeyPatch, result: exec_util.CommandResult | None
) -> None:
    _install(monkeypatch, FakeGitRunner(lambda _repo, _args: result))

    with patch("gitu.git.log.warning") as mock_warning:
        value = git.run_git(Path("/src/demo"), ["status", "--porcelain"])

    assert value == ""
    mock_warning.assert_called_once()


def test_run_git_failure_diagnostic_includes_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        FakeGitRunner(lambda _repo, _args: failed(stderr="fatal: no upstream configured")),
    )

    with patch("gitu.git.log.warning") as mock_warning:
        git.run_git(Path("/src/demo"), ["cherry", "-v"])

    message = mock_warning.call_args.args[0]
    assert "git -C /src/demo cherry -v" in message
    assert "fatal: no upstream configured" in message


def test_git_fetch_judges_success_by_exit_status(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeGitRunner(lambda _repo, _args: ok(stdout="")))
    assert git.git_fetch(Path("/src/demo")) is True

    _install(monkeypatch, FakeGitRunner(lambda _repo, _args: failed()))
    with patch("gitu.git.log.warning"):
        assert git.git_fetch(Path("/src/demo")) is False


def test_git_pull_requests_combined_output(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = _install(
        monkeypatch, FakeGitRunner(lambda _repo, _args: ok(stdout="Fast-forward\n"))
    )

    output = git.git_pull(Path("/src/demo"), timeout_seconds=60)

    assert output == "Fast-forward\n"
    request = runner.requests[0]
    assert request.argv[-1] == "pull"
    assert request.merge_stderr is True
    assert request.timeout_seconds == 60


def test_git_pull_returns_none_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeGitRunner(lambda _repo, _args: failed(stderr="conflict")))

    with patch("gitu.git.log.warning"):
        assert git.git_pull(Path("/src/demo")) is None


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("On branch master\nYour branch is up to date with 'origin/master'.", True),
        ("On branch master\nYour branch is behind 'origin/master' by 1 commit", False),
        ("On branch master\nnothing to commit", False),
        ("", False),
    ],
)
def test_git_is_up_to_date(status: str, expected: bool) -> None:
    assert git.git_is_up_to_date(status) is expected
