"""Logging configuration for the kubearmctl package."""
import logging
import os
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

NOISY_LOGGERS = ('urllib3', 'docker', 'kubernetes')


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for a CLI run.

    Args:
        debug: Enable DEBUG level and library debug output
        log_file: Optional path of an additional log file
            (defaults to the KUBEARMCTL_LOG_FILE environment variable)

    Returns:
        The package logger
    """
    level_name = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handlers = [logging.StreamHandler()]
    log_file = log_file or os.getenv("KUBEARMCTL_LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=os.getenv("LOG_FORMAT", DEFAULT_FORMAT),
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True,
    )

    # Disable debug logging for noisy libraries
    if not debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("kubearmctl")
