# ruff: noqa: E402

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import gitu.exec as exec_util

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

TEST_IDENTITY = ("-c", "user.name=Test User", "-c", "user.email=test@example.com")


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *TEST_IDENTITY, "-C", str(repo), *args],
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content, encoding="utf-8")
    git(repo, "add", name)
    git(repo, "commit", "-m", message)


def init_origin(root: Path, name: str, branch: str = "master") -> Path:
    """Create a bare remote named ``name`` with one commit on ``branch``."""
    seed = root / "seeds" / name
    seed.mkdir(parents=True)
    git(seed, "init")
    git(seed, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    commit_file(seed, "README.md", "base\n", "chore: initial")
    remote = root / "remotes" / f"{name}.git"
    remote.parent.mkdir(parents=True, exist_ok=True)
    subprocess.run(
        ["git", "clone", "--bare", str(seed), str(remote)],
        check=True,
        capture_output=True,
    )
    return remote


def clone_into(remote: Path, dest: Path) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    subprocess.run(
        ["git", "clone", str(remote), str(dest)],
        check=True,
        capture_output=True,
    )
    return dest


def push_upstream_commit(root: Path, remote: Path, name: str) -> None:
    """Advance ``remote`` by one commit made in a scratch clone."""
    scratch = root / "scratch" / f"{remote.stem}-{name}"
    clone_into(remote, scratch)
    commit_file(scratch, name, f"{name}\n", f"feat: {name}")
    git(scratch, "push", "origin", "HEAD")


class FakeGitRunner:
    """Command runner answering git invocations from a callback.

    The callback receives the repository name (from ``-C``) and the git
    arguments and returns a ``CommandResult`` (or ``None`` for spawn failure).
    """

    def __init__(
        self,
        respond: Callable[[str, tuple[str, ...]], exec_util.CommandResult | None],
    ) -> None:
        self.respond = respond
        self.requests: list[exec_util.CommandRequest] = []

    def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult | None:
        self.requests.append(request)
        argv = request.argv
        repo_name = Path(argv[argv.index("-C") + 1]).name
        args = argv[argv.index("-C") + 2 :]
        return self.respond(repo_name, args)


def ok(argv: tuple[str, ...] = (), stdout: str = "") -> exec_util.CommandResult:
    return exec_util.CommandResult(argv=argv, returncode=0, stdout=stdout, stderr="")


def failed(
    argv: tuple[str, ...] = (), stderr: str = "fatal: boom", returncode: int = 128
) -> exec_util.CommandResult:
    return exec_util.CommandResult(argv=argv, returncode=returncode, stdout="", stderr=stderr)


def timed_out(argv: tuple[str, ...] = ()) -> exec_util.CommandResult:
    return exec_util.CommandResult(
        argv=argv,
        returncode=exec_util.TIMEOUT_RETURNCODE,
        stdout="",
        stderr="",
        timed_out=True,
    )


def make_repo_dirs(root: Path, *names: str) -> list[Path]:
    """Create bare ``<name>/.git`` directories (no real git metadata)."""
    paths = []
    for name in names:
        repo = root / name
        (repo / ".git").mkdir(parents=True)
        paths.append(repo)
    return paths
