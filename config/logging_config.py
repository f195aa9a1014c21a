"""Logging setup: console output plus rotating log files under ``log_dir``."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

APP_LOG = "dreamlines.log"
# Every Gemini request and its outcome, at DEBUG regardless of the app level
GENAI_LOG = "genai_calls.log"
GENAI_LOGGER = "tools.genai_client"

# Third-party loggers that flood INFO with per-request lines
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "google_genai.models", "PIL")


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        str(path),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str | Path] = None,
    console_enabled: bool = True,
) -> Path:
    """Route application logs to ``log_dir`` and, optionally, the console.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        level: Level for the root logger and the app log file.
        log_dir: Directory for log files. Defaults to ./data/logs.
        console_enabled: Also log to stderr. The CLI enables this with --verbose
            only, so progress output stays readable.

    Returns:
        The resolved log directory.
    """
    log_dir = Path(log_dir or "./data/logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    if console_enabled:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(formatter)
        root.addHandler(console)
    root.addHandler(_rotating_handler(log_dir / APP_LOG, level, formatter))

    genai_logger = logging.getLogger(GENAI_LOGGER)
    for handler in list(genai_logger.handlers):
        genai_logger.removeHandler(handler)
        handler.close()
    genai_logger.setLevel(logging.DEBUG)
    genai_logger.addHandler(_rotating_handler(log_dir / GENAI_LOG, logging.DEBUG, formatter))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging ready: level=%s dir=%s console=%s",
        logging.getLevelName(level), log_dir, console_enabled,
    )
    return log_dir
