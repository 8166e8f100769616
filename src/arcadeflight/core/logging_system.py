"""Logging setup for arcadeflight.

Modules obtain loggers with ``get_logger(__name__)``. The application calls
``initialize_logging()`` once at startup, optionally with a YAML file in
``logging.config.dictConfig`` format.

Typical usage example:
    from arcadeflight.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    logger = get_logger(__name__)
    logger.info("Simulation started")
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Any

import yaml

ROOT_LOGGER_NAME = "arcadeflight"
LOG_FILE_NAME = "arcadeflight.log"

_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def get_log_directory(use_platform_dir: bool = False) -> Path:
    """Get the directory log files are written to.

    Args:
        use_platform_dir: Use the per-user platform log directory instead of
            ``./logs``.

    Returns:
        Log directory path (not created).
    """
    if not use_platform_dir:
        return Path("logs")
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Logs" / "arcadeflight"
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA", str(Path.home() / "AppData" / "Local"))
        return Path(base) / "arcadeflight" / "logs"
    base = os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))
    return Path(base) / "arcadeflight"


def _default_config(log_file: Path | None, level: str) -> dict[str, Any]:
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": level,
            "stream": "ext://sys.stderr",
        }
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "level": "DEBUG",
            "filename": str(log_file),
            "maxBytes": 1_048_576,
            "backupCount": 3,
            "encoding": "utf-8",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": _DEFAULT_FORMAT}},
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER_NAME: {
                "level": "DEBUG",
                "handlers": list(handlers),
                "propagate": False,
            }
        },
    }


def initialize_logging(
    config_path: str | None = None,
    use_platform_dir: bool = False,
    level: str = "INFO",
    log_to_file: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        config_path: YAML file in dictConfig format. When missing or invalid the
            built-in console + rotating file configuration is used.
        use_platform_dir: Write log files to the platform log directory.
        level: Console log level for the built-in configuration.
        log_to_file: Add the rotating file handler to the built-in configuration.
    """
    global _initialized  # pylint: disable=global-statement

    log_dir = get_log_directory(use_platform_dir)

    if config_path is not None and Path(config_path).exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            _resolve_log_files(config, log_dir)
            logging.config.dictConfig(config)
            _initialized = True
            get_logger(__name__).debug("Logging configured from %s", config_path)
            return
        except (OSError, ValueError, yaml.YAMLError) as e:
            # Fall through to built-in configuration
            print(f"Invalid logging config {config_path}: {e}", file=sys.stderr)

    log_file = None
    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME
    logging.config.dictConfig(_default_config(log_file, level.upper()))
    _initialized = True


def is_initialized() -> bool:
    """Whether initialize_logging() has run."""
    return _initialized


def _resolve_log_files(config: dict[str, Any], log_dir: Path) -> None:
    """Place relative handler filenames inside the log directory."""
    for handler in config.get("handlers", {}).values():
        filename = handler.get("filename")
        if filename and not Path(filename).is_absolute():
            log_dir.mkdir(parents=True, exist_ok=True)
            handler["filename"] = str(log_dir / filename)
