# ruff: noqa: E402

import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import gitu.config as config
import gitu.log as gitu_log

DOCTEST_MODULES = {
    ROOT / "src" / "gitu" / "__init__.py",
    ROOT / "src" / "gitu" / "config.py",
    ROOT / "src" / "gitu" / "discovery.py",
    ROOT / "src" / "gitu" / "exec.py",
    ROOT / "src" / "gitu" / "git.py",
    ROOT / "src" / "gitu" / "io.py",
    ROOT / "src" / "gitu" / "models.py",
    ROOT / "src" / "gitu" / "paths.py",
    ROOT / "src" / "gitu" / "report.py",
}


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for env_name in (*config.ENV_SETTINGS, "GITU_LOG_LEVEL", "GITU_NO_COLOR"):
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.setenv("GITU_CONFIG", str(tmp_path / "missing-config.json"))
    monkeypatch.setattr(gitu_log, "_configured_level", None)
    monkeypatch.setattr(gitu_log, "_no_color_override", None)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
