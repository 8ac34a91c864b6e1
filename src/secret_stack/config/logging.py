"""
Logging bootstrap.

Every entry point calls bootstrap_logging() so the library and the command
line configure logging the same way, from an optional logging.ini.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

VALID_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _find_logging_config() -> Optional[Path]:
    """
    Locate an INI logging config.

    Looks for logging.ini in the current working directory, then config/.

    Returns:
        The first existing candidate, or None.
    """
    for candidate in (Path('logging.ini'), Path('config/logging.ini')):
        if candidate.exists():
            return candidate
    return None


def _resolve_level(level: Optional[str] = None) -> str:
    """Resolve the effective level from an explicit value or LOG_LEVEL."""
    raw = level or os.environ.get('LOG_LEVEL') or 'INFO'
    resolved = raw.strip().upper()
    if resolved not in VALID_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{resolved}', using INFO", file=sys.stderr)
        return 'INFO'
    return resolved


def bootstrap_logging(level: Optional[str] = None) -> None:
    """
    Bootstrap logging configuration for the application.

    This function:
    1. Loads logging.ini with logging.config.fileConfig() when one exists
    2. Falls back to basicConfig on stderr otherwise
    3. Applies the LOG_LEVEL environment variable (or explicit level) afterwards

    Args:
        level: Optional explicit level, takes precedence over LOG_LEVEL
    """
    effective = _resolve_level(level)
    config_path = _find_logging_config()

    if config_path is not None:
        try:
            logging.config.fileConfig(str(config_path), disable_existing_loggers=False)
        except Exception as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            config_path = None

    if config_path is None:
        logging.basicConfig(
            level=getattr(logging, effective),
            format='%(levelname)s: %(name)s: %(message)s',
            stream=sys.stderr
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, effective))
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(getattr(logging, effective))

    logging.getLogger(__name__).debug(
        f"Logging configured at {effective} from {config_path or 'basicConfig'}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Named logger; bootstraps logging first if the root logger has no handlers.

    Args:
        name: Name for the logger

    Returns:
        logging.Logger
    """
    if not logging.getLogger().handlers:
        bootstrap_logging()
    return logging.getLogger(name)
