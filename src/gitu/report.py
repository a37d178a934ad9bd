"""Run outcome aggregation and rendering."""

from __future__ import annotations

import json
import threading
from enum import Enum
from typing import Literal

from rich import box
from rich.console import Console
from rich.table import Table

from . import log

ReportFormat = Literal["text", "table", "json"]


class Category(str, Enum):
    """Report categories, in report order."""

    NOT_ON_BRANCH = "not_on_branch"
    UNCOMMITTED_CHANGES = "uncommitted_changes"
    UNPUSHED_COMMITS = "unpushed_commits"
    NO_REMOTE_UPDATES = "no_remote_updates"
    UPDATED = "updated"
    UPDATE_FAILED = "update_failed"


FAILURE_CATEGORIES = (
    Category.NOT_ON_BRANCH,
    Category.UNCOMMITTED_CHANGES,
    Category.UNPUSHED_COMMITS,
    Category.NO_REMOTE_UPDATES,
)
UPDATE_CATEGORIES = (Category.UPDATED, Category.UPDATE_FAILED)


class AggregateReport:
    """Categorized repository names shared by all evaluation workers.

    ``append`` is the only mutation and is safe to call from any thread.
    Readers should wait until every worker has finished.

    Example:
        >>> report = AggregateReport()
        >>> report.append("demo", Category.UPDATED)
        >>> report.names(Category.UPDATED)
        ('demo',)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[Category, list[str]] = {category: [] for category in Category}

    def append(self, name: str, category: Category) -> None:
        with self._lock:
            self._entries[Category(category)].append(name)

    def names(self, category: Category) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._entries[Category(category)])

    def snapshot(self) -> dict[Category, tuple[str, ...]]:
        with self._lock:
            return {category: tuple(names) for category, names in self._entries.items()}

    def to_dict(self) -> dict[str, list[str]]:
        return {category.value: list(names) for category, names in self.snapshot().items()}

    def __len__(self) -> int:
        with self._lock:
            return sum(len(names) for names in self._entries.values())


def category_header(category: Category, branch: str) -> str:
    """Return the human heading for a category.

    Example:
        >>> category_header(Category.NOT_ON_BRANCH, "main")
        'Repositories not on branch main, skipping:'
    """
    if category is Category.NOT_ON_BRANCH:
        return f"Repositories not on branch {branch}, skipping:"
    if category is Category.UNCOMMITTED_CHANGES:
        return "Repositories with uncommitted changes, skipping:"
    if category is Category.UNPUSHED_COMMITS:
        return "Repositories with unpushed commits, skipping:"
    if category is Category.NO_REMOTE_UPDATES:
        return "Repositories with no updates remotely, skipping:"
    if category is Category.UPDATED:
        return "Repositories successfully updated:"
    return "Repositories that failed to update:"


def _render_text(snapshot: dict[Category, tuple[str, ...]], branch: str) -> str:
    blocks: list[str] = []
    for category in Category:
        names = snapshot[category]
        if not names:
            continue
        blocks.append(f"{category_header(category, branch)}\n- {', '.join(names)}")
    return "\n\n".join(blocks)


def _render_table(snapshot: dict[Category, tuple[str, ...]], branch: str) -> str:
    table = Table(box=box.SIMPLE_HEAVY, show_lines=False)
    table.add_column("Outcome", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_column("Repositories")
    for category in Category:
        names = snapshot[category]
        if not names:
            continue
        table.add_row(
            category_header(category, branch).rstrip(":"),
            str(len(names)),
            ", ".join(names),
        )
    console = Console(no_color=log.no_color(), highlight=False, width=120)
    with console.capture() as capture:
        console.print(table)
    return capture.get().rstrip()


def _render_json(report: AggregateReport, branch: str) -> str:
    return json.dumps({"branch": branch, "categories": report.to_dict()}, indent=2)


def render_report(
    report: AggregateReport, branch: str, *, format: ReportFormat = "text"
) -> str:
    """Render a finished report.

    Args:
        report: Aggregated outcomes of a completed run.
        branch: Target branch the run checked against.
        format: One of ``text``, ``table`` or ``json``.

    Returns:
        The rendered report; empty categories are omitted from text and table
        output.
    """
    if format == "json":
        return _render_json(report, branch)
    snapshot = report.snapshot()
    if format == "table":
        return _render_table(snapshot, branch)
    if format == "text":
        return _render_text(snapshot, branch)
    raise ValueError(f"unsupported report format: {format}")
