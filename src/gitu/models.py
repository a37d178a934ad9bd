"""Pydantic models for gitu configuration data."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .checks import DEFAULT_BRANCH
from .git import DEFAULT_TIMEOUT_SECONDS
from .pool import default_parallelism

DEFAULT_PULL_TIMEOUT_SECONDS = 120.0


class GituConfig(BaseModel):
    """Resolved settings for one run.

    Attributes:
        branch: Branch every repository must be on to be updated.
        parallelism: Maximum number of repositories evaluated at once.
        root: Directory scanned for repositories.
        timeout_seconds: Wait limit for each inspection command.
        pull_timeout_seconds: Wait limit for each ``git pull``.
        git_path: Git executable.

    Example:
        >>> GituConfig(branch=" main ", parallelism=4, root="/src").branch
        'main'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    branch: str = DEFAULT_BRANCH
    parallelism: int = Field(default_factory=default_parallelism, ge=1)
    root: Path = Field(default_factory=Path.cwd)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    pull_timeout_seconds: float = Field(default=DEFAULT_PULL_TIMEOUT_SECONDS, gt=0)
    git_path: str = "git"

    @field_validator("branch", mode="before")
    @classmethod
    def normalize_branch(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("branch must not be empty")
        return value

    @field_validator("git_path", mode="before")
    @classmethod
    def normalize_git_path(cls, value: object) -> object:
        if value is None:
            return "git"
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or "git"
        return value

    @field_validator("root", mode="after")
    @classmethod
    def expand_root(cls, value: Path) -> Path:
        return value.expanduser()
