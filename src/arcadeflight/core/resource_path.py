"""Locate configuration files shipped with the package."""

from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent.parent


def get_config_dir() -> Path:
    """Directory holding the packaged YAML configuration."""
    return PACKAGE_DIR / "config"


def get_config_path(name: str) -> Path:
    """Path of a packaged configuration file.

    Args:
        name: File name relative to the config directory (e.g. "logging.yaml").

    Returns:
        Absolute path (may not exist).
    """
    return get_config_dir() / name


def get_user_dir() -> Path:
    """Per-user settings directory (~/.arcadeflight)."""
    return Path.home() / ".arcadeflight"
