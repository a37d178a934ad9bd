"""Discover, evaluate and update every repository beneath a root."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import git, log
from .checks import POLICY_CHECKS, CheckParams, PolicyCheck, evaluate_policy
from .discovery import Repository, discover_repositories
from .io import say_block
from .models import GituConfig
from .pool import BoundedPool
from .report import AggregateReport, Category


@dataclass(frozen=True)
class CheckOutcome:
    """Result of evaluating one repository."""

    repository: Repository
    failed: tuple[Category, ...] = field(default_factory=tuple)
    update_attempted: bool = False
    updated: bool = False


def check_params_for(config: GituConfig) -> CheckParams:
    return CheckParams(
        branch=config.branch,
        timeout_seconds=config.timeout_seconds,
        pull_timeout_seconds=config.pull_timeout_seconds,
        git_path=config.git_path,
    )


def attempt_update(repository: Repository, params: CheckParams) -> bool:
    """Pull ``repository`` from upstream and show the pull output.

    Returns:
        ``True`` when the pull exited successfully.
    """
    output = git.git_pull(
        repository.path,
        timeout_seconds=params.pull_timeout_seconds,
        git_path=params.git_path,
    )
    if output is None:
        log.warning(f"failed to pull repository {repository.path}")
        return False
    say_block(f"git pull: {repository.name}", output)
    return True


def evaluate_repository(
    repository: Repository,
    params: CheckParams,
    report: AggregateReport,
    checks: tuple[PolicyCheck, ...] = POLICY_CHECKS,
) -> CheckOutcome:
    """Run the full policy against one repository and record the outcome."""
    failed = evaluate_policy(repository, params, checks)
    for category in failed:
        report.append(repository.name, category)
    if failed:
        return CheckOutcome(repository=repository, failed=tuple(failed))

    updated = attempt_update(repository, params)
    if updated:
        log.success(f"updated {repository.name}")
        report.append(repository.name, Category.UPDATED)
    else:
        report.append(repository.name, Category.UPDATE_FAILED)
    return CheckOutcome(repository=repository, update_attempted=True, updated=updated)


def run_update(config: GituConfig) -> AggregateReport:
    """Evaluate every repository under ``config.root`` and return the report.

    Discovery runs on the calling thread and blocks while the pool is full.
    The report is returned only after every admitted unit has finished.

    Raises:
        DiscoveryError: The root directory cannot be scanned.
    """
    params = check_params_for(config)
    report = AggregateReport()
    repositories = discover_repositories(config.root)
    count = 0
    with BoundedPool(config.parallelism) as pool:
        for repository in repositories:
            count += 1
            log.debug(f"admitting {repository.name} ({repository.path})")
            pool.submit(repository.name, evaluate_repository, repository, params, report)
    log.debug(f"evaluated {count} repositories under {config.root}")
    return report
