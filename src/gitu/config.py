"""Configuration helpers for gitu runs.

Settings are layered, lowest precedence first: built-in defaults, the user
``config.json``, ``GITU_*`` environment variables, then command-line flags.

Example:
    >>> from gitu.config import env_overrides
    >>> env_overrides({"GITU_BRANCH": "main"})
    {'branch': 'main'}
"""

import json
import os
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from . import paths
from .io import die
from .models import GituConfig

ENV_SETTINGS = {
    "GITU_BRANCH": "branch",
    "GITU_PARALLELISM": "parallelism",
    "GITU_TIMEOUT": "timeout_seconds",
    "GITU_PULL_TIMEOUT": "pull_timeout_seconds",
    "GITU_GIT_PATH": "git_path",
}


def load_json(path: Path) -> dict | None:
    """Load a JSON file if it exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def file_overrides(path: Path) -> dict:
    """Return settings from the user config file (empty when absent)."""
    try:
        payload = load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        die(f"failed to read config at {path}: {exc}")
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        die(f"invalid config at {path}: expected a JSON object")
    return payload


def env_overrides(environ: Mapping[str, str] | None = None) -> dict:
    """Return settings taken from ``GITU_*`` environment variables."""
    source = os.environ if environ is None else environ
    overrides: dict = {}
    for env_name, field_name in ENV_SETTINGS.items():
        value = source.get(env_name, "").strip()
        if value:
            overrides[field_name] = value
    return overrides


def _format_validation_error(exc: ValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "config"
        details.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(details)


def resolve_config(
    cli_overrides: Mapping[str, object] | None = None,
    *,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> GituConfig:
    """Build the run configuration, exiting on invalid settings.

    Args:
        cli_overrides: Values supplied on the command line; ``None`` entries
            are ignored.
        config_path: User config file (defaults to ``paths.user_config_path``).
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Validated ``GituConfig``.
    """
    path = config_path or paths.user_config_path()
    payload: dict = {}
    payload.update(file_overrides(path))
    payload.update(env_overrides(environ))
    payload.update(
        {key: value for key, value in (cli_overrides or {}).items() if value is not None}
    )
    try:
        return GituConfig.model_validate(payload)
    except ValidationError as exc:
        die(f"invalid configuration: {_format_validation_error(exc)}")
        raise
