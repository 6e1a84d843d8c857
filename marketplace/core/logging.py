# marketplace/core/logging.py
import logging
import sys
from pathlib import Path

from marketplace.core.config import get_settings

# Names of loggers that already carry our handlers
_LOGGER_INITIALIZED = {}

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_log_file(log_dir=None):
    raw = log_dir or get_settings().log_dir
    if not raw:
        return None
    path = Path(raw).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path / "marketplace.log"


def get_logger(
    name="marketplace",
    level=None,
    log_dir=None,
    console=True,
    fmt=DEFAULT_FORMAT,
    datefmt=DEFAULT_DATEFMT,
    propagate=False,
):
    """
    Get or create a logger with optional configuration.
    - name: Logger name (default 'marketplace')
    - level: Logging level (default from settings.log_level)
    - log_dir: Directory for a marketplace.log file (default settings.log_dir, none if unset)
    - console: If True, logs also go to stderr
    - propagate: Whether to propagate to root logger (default False)
    """
    logger = logging.getLogger(name)
    if not _LOGGER_INITIALIZED.get(name, False):
        if level is None:
            level = get_settings().log_level.upper()
        logger.setLevel(level)
        logger.propagate = propagate
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

        file_path = _resolve_log_file(log_dir)
        if file_path is not None:
            fh = logging.FileHandler(file_path, mode="a", encoding="utf-8")
            fh.setFormatter(formatter)
            logger.addHandler(fh)

        if console:
            ch = logging.StreamHandler(sys.stderr)
            ch.setFormatter(formatter)
            logger.addHandler(ch)

        _LOGGER_INITIALIZED[name] = True

    return logger


def reset_logger(name=None):
    """Drop handlers from loggers created by :func:`get_logger` so they can be reconfigured."""
    names = list(_LOGGER_INITIALIZED.keys()) if name is None else [name]

    for n in names:
        logger = logging.getLogger(n)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _LOGGER_INITIALIZED.pop(n, None)
