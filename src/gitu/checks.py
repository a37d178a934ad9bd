"""Update policy checks evaluated against each repository.

Every check answers "does this repository violate the condition?" and carries
the report category it files the repository under. The checks run in the
order of ``POLICY_CHECKS`` and all of them run, so one repository can fail
several at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from . import git, log
from .discovery import Repository
from .report import Category

DEFAULT_BRANCH = "master"


@dataclass(frozen=True)
class CheckParams:
    """Per-run parameters shared by every check."""

    branch: str = DEFAULT_BRANCH
    timeout_seconds: float = git.DEFAULT_TIMEOUT_SECONDS
    pull_timeout_seconds: float | None = None
    git_path: str = "git"


class PolicyCheck(Protocol):
    name: str
    category: Category

    def evaluate(self, repository: Repository, params: CheckParams) -> bool: ...


class NotOnBranch:
    name = "not-on-branch"
    category = Category.NOT_ON_BRANCH

    def evaluate(self, repository: Repository, params: CheckParams) -> bool:
        # An empty answer (failed or timed-out query) never equals the target.
        current = git.git_current_branch(
            repository.path,
            timeout_seconds=params.timeout_seconds,
            git_path=params.git_path,
        )
        return current != params.branch


class UncommittedChanges:
    name = "uncommitted-changes"
    category = Category.UNCOMMITTED_CHANGES

    def evaluate(self, repository: Repository, params: CheckParams) -> bool:
        status = git.git_status_porcelain(
            repository.path,
            timeout_seconds=params.timeout_seconds,
            git_path=params.git_path,
        )
        return status != ""


class UnpushedCommits:
    name = "unpushed-commits"
    category = Category.UNPUSHED_COMMITS

    def evaluate(self, repository: Repository, params: CheckParams) -> bool:
        outgoing = git.git_outgoing_commits(
            repository.path,
            timeout_seconds=params.timeout_seconds,
            git_path=params.git_path,
        )
        return outgoing != ""


class NoRemoteUpdates:
    """Violated when there is nothing new upstream.

    Remote-tracking refs are fetched first; without the fetch the status text
    describes stale refs. A failed fetch counts as a violation since nothing
    is known to be pullable.
    """

    name = "no-remote-updates"
    category = Category.NO_REMOTE_UPDATES

    def evaluate(self, repository: Repository, params: CheckParams) -> bool:
        fetched = git.git_fetch(
            repository.path,
            timeout_seconds=params.timeout_seconds,
            git_path=params.git_path,
        )
        if not fetched:
            return True
        status = git.git_tracking_status(
            repository.path,
            timeout_seconds=params.timeout_seconds,
            git_path=params.git_path,
        )
        return git.git_is_up_to_date(status)


POLICY_CHECKS: tuple[PolicyCheck, ...] = (
    NotOnBranch(),
    UncommittedChanges(),
    UnpushedCommits(),
    NoRemoteUpdates(),
)


def evaluate_policy(
    repository: Repository,
    params: CheckParams,
    checks: tuple[PolicyCheck, ...] = POLICY_CHECKS,
) -> list[Category]:
    """Run every check in order and return the failed categories.

    Args:
        repository: Repository to inspect.
        params: Run parameters (target branch, timeouts, git path).
        checks: Ordered checks to run.

    Returns:
        Categories of the failed checks, in evaluation order.
    """
    failed: list[Category] = []
    for check in checks:
        violated = check.evaluate(repository, params)
        log.trace(f"{repository.name}: {check.name} -> {'fail' if violated else 'pass'}")
        if violated:
            failed.append(check.category)
    return failed
