"""
Logging Configuration

Handlers for the ``agentdesk`` logger tree. Console output goes to stderr
because the CLI prints its JSON and CSV results on stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from logging.handlers import RotatingFileHandler


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty libraries held at WARNING unless the config names them
NOISY_LOGGERS = {
    'urllib3': 'WARNING',
    'werkzeug': 'WARNING',
}


def _level(name: Optional[str]) -> int:
    return getattr(logging, str(name or 'INFO').upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_size_mb: int = 10,
    backup_count: int = 5,
    library_levels: Optional[Dict[str, str]] = None
) -> logging.Logger:
    """
    Install console and (optionally) rotating file handlers on the
    ``agentdesk`` logger. Module loggers from ``logging.getLogger(__name__)``
    propagate up to it.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (optional)
        max_size_mb: Max log file size before rotation
        backup_count: Number of backup files to keep
        library_levels: Per-library levels, merged over NOISY_LOGGERS

    Returns:
        The ``agentdesk`` logger
    """
    logger = logging.getLogger("agentdesk")
    logger.setLevel(_level(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name, lib_level in {**NOISY_LOGGERS, **(library_levels or {})}.items():
        logging.getLogger(name).setLevel(_level(lib_level))

    return logger


def setup_logging_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Apply the ``logging`` section of a loaded config."""
    log_config = config.get('logging') or {}
    return setup_logging(
        level=log_config.get('level', 'INFO'),
        log_file=log_config.get('file'),
        max_size_mb=int(log_config.get('max_size_mb', 10)),
        backup_count=int(log_config.get('backup_count', 5)),
        library_levels=log_config.get('libraries'),
    )
