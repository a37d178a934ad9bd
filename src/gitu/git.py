"""Git helper functions used by the gitu policy checks."""

import os
from pathlib import Path

from . import exec as exec_util
from . import log

DEFAULT_TIMEOUT_SECONDS = 10.0
UP_TO_DATE_MARKER = "Your branch is up to date"


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path.

    Example:
        >>> git_command(["status"])
        ['git', 'status']
        >>> git_command(["status"], git_path=" /usr/bin/git ")
        ['/usr/bin/git', 'status']
    """
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def git_env() -> dict[str, str]:
    """Return the environment git runs under.

    Output is forced to the C locale so human-readable status text can be
    matched, and terminal credential prompts are disabled.
    """
    env = dict(os.environ)
    env["LC_ALL"] = "C"
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_git_result(
    repo_dir: Path,
    args: list[str],
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
    merge_stderr: bool = False,
) -> exec_util.CommandResult | None:
    """Run git scoped to ``repo_dir`` and log a diagnostic on failure.

    Args:
        repo_dir: Repository the command applies to.
        args: Git arguments (without the executable).
        timeout_seconds: Upper bound on the wait; ``None`` waits forever.
        git_path: Optional git executable path.
        merge_stderr: Capture stderr into stdout.

    Returns:
        The command result, or ``None`` when git could not be spawned.
    """
    request = exec_util.CommandRequest(
        argv=tuple(git_command(["-C", str(repo_dir), *args], git_path=git_path)),
        env=git_env(),
        timeout_seconds=timeout_seconds,
        merge_stderr=merge_stderr,
    )
    result = exec_util.run_with_runner(request)
    if result is None or not result.ok:
        log.warning(exec_util.command_failure_detail(request, result))
    return result


def run_git(
    repo_dir: Path,
    args: list[str],
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
) -> str:
    """Run git scoped to ``repo_dir`` and return trimmed stdout.

    Any failure (non-zero exit, timeout, spawn failure) is logged and reduced
    to an empty string, so callers read ``""`` as "nothing detected".

    Args:
        repo_dir: Repository the command applies to.
        args: Git arguments (without the executable).
        timeout_seconds: Upper bound on the wait.
        git_path: Optional git executable path.

    Returns:
        Stdout with trailing whitespace removed, or ``""`` on failure.
    """
    result = run_git_result(
        repo_dir, args, timeout_seconds=timeout_seconds, git_path=git_path
    )
    if result is None or not result.ok:
        return ""
    return result.stdout.rstrip()


def git_current_branch(
    repo_dir: Path,
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
) -> str:
    """Return the checked-out branch name (``HEAD`` when detached, ``""`` on error)."""
    return run_git(
        repo_dir,
        ["rev-parse", "--abbrev-ref", "HEAD"],
        timeout_seconds=timeout_seconds,
        git_path=git_path,
    )


def git_status_porcelain(
    repo_dir: Path,
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
) -> str:
    """Return ``git status --porcelain`` output (staged, unstaged and untracked)."""
    return run_git(
        repo_dir,
        ["status", "--porcelain"],
        timeout_seconds=timeout_seconds,
        git_path=git_path,
    )


def git_outgoing_commits(
    repo_dir: Path,
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
) -> str:
    """Return ``git cherry -v`` output: local commits missing from upstream."""
    return run_git(
        repo_dir,
        ["cherry", "-v"],
        timeout_seconds=timeout_seconds,
        git_path=git_path,
    )


def git_fetch(
    repo_dir: Path,
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
) -> bool:
    """Refresh remote-tracking refs; return ``True`` when the fetch succeeded.

    ``git fetch`` reports progress on stderr and is usually silent on stdout,
    so success is judged by exit status rather than output.
    """
    result = run_git_result(
        repo_dir, ["fetch"], timeout_seconds=timeout_seconds, git_path=git_path
    )
    return result is not None and result.ok


def git_tracking_status(
    repo_dir: Path,
    *,
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    git_path: str | None = None,
) -> str:
    """Return the human ``git status -uno`` text describing upstream tracking."""
    return run_git(
        repo_dir,
        ["status", "-uno"],
        timeout_seconds=timeout_seconds,
        git_path=git_path,
    )


def git_is_up_to_date(status_text: str) -> bool:
    """Return whether ``git status`` text says the branch matches upstream.

    Example:
        >>> git_is_up_to_date("Your branch is up to date with 'origin/master'.")
        True
        >>> git_is_up_to_date("Your branch is behind 'origin/master' by 2 commits")
        False
    """
    return UP_TO_DATE_MARKER in status_text


def git_pull(
    repo_dir: Path,
    *,
    timeout_seconds: float | None = None,
    git_path: str | None = None,
) -> str | None:
    """Run ``git pull`` with combined output.

    Returns:
        The combined stdout/stderr text on success, otherwise ``None``.
    """
    result = run_git_result(
        repo_dir,
        ["pull"],
        timeout_seconds=timeout_seconds,
        git_path=git_path,
        merge_stderr=True,
    )
    if result is None or not result.ok:
        return None
    return result.stdout
