"""Path helpers for locating gitu configuration files."""

import os
from pathlib import Path

from platformdirs import user_config_dir

GITU_APP_NAME = "gitu"
CONFIG_FILENAME = "config.json"
CONFIG_PATH_ENV = "GITU_CONFIG"


def gitu_config_dir() -> Path:
    """Return the base gitu configuration directory.

    Returns:
        Path to the user configuration directory for gitu.

    Example:
        >>> isinstance(gitu_config_dir(), Path)
        True
    """
    return Path(user_config_dir(GITU_APP_NAME))


def user_config_path() -> Path:
    """Return the user configuration file path.

    ``GITU_CONFIG`` overrides the platform default location.

    Example:
        >>> user_config_path().name
        'config.json'
    """
    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return gitu_config_dir() / CONFIG_FILENAME
