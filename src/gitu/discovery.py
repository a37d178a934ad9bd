"""Repository discovery beneath a root directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from . import log

GIT_MARKER = ".git"


class DiscoveryError(Exception):
    """Raised when the root directory cannot be walked at all."""


@dataclass(frozen=True)
class Repository:
    """A discovered repository root.

    Attributes:
        path: Absolute path to the working tree.
        name: Display name (final path component).

    Example:
        >>> Repository.at(Path("/src/demo")).name
        'demo'
    """

    path: Path
    name: str

    @classmethod
    def at(cls, path: Path) -> "Repository":
        return cls(path=path, name=path.name or str(path))


def is_repository_root(path: Path) -> bool:
    return (path / GIT_MARKER).is_dir()


def discover_repositories(root: Path) -> Iterator[Repository]:
    """Yield every repository root beneath ``root``.

    Directories holding a ``.git`` directory are yielded and not descended
    into. Unreadable entries are logged and skipped. Symlinked directories
    are not followed.

    Args:
        root: Directory to scan.

    Returns:
        A lazy iterator of ``Repository`` values.

    Raises:
        DiscoveryError: ``root`` does not exist, is not a directory, or
            cannot be listed.
    """
    root = root.expanduser()
    if not root.is_dir():
        raise DiscoveryError(f"root directory not found: {root}")
    root = root.resolve()
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        detail = exc.strerror or exc
        raise DiscoveryError(f"cannot read root directory {root}: {detail}") from exc
    return _walk(root)


def _walk(root: Path) -> Iterator[Repository]:
    def onerror(err: OSError) -> None:
        if err.filename is not None and Path(err.filename) == root:
            raise DiscoveryError(f"cannot read root directory {root}: {err.strerror or err}")
        log.warning(f"skipping {err.filename}: {err.strerror or err}")

    for dirpath, dirnames, _filenames in os.walk(root, onerror=onerror):
        if GIT_MARKER in dirnames:
            current = Path(dirpath)
            if is_repository_root(current):
                dirnames[:] = []
                log.debug(f"found repository {current}")
                yield Repository.at(current)
                continue
        dirnames.sort()
