"""Structured logging setup for Blockfence."""

import structlog
from pathlib import Path
from typing import Any, Optional
import os


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_log_file() -> Path:
    """Location of the JSON log under the user's cache directory."""
    return Path.home() / ".cache" / "blockfence" / "logs" / "blockfence.log"


def configure_logging(log_file: Optional[Path] = None) -> Path:
    """
    Configure structlog to append JSON lines to a log file.

    The terminal belongs to the Textual UI, so nothing is logged to stdout.
    The level comes from the BLOCKFENCE_LOG_LEVEL environment variable
    (unknown values fall back to INFO):
    - DEBUG: Escape presses that do not change mode, auto-indent decisions
    - INFO: Mode transitions, region flush-back, block creation
    - WARNING: Fallbacks (unknown highlight language, vanished region)
    - ERROR: Configuration failures

    Args:
        log_file: Where to write (default: ~/.cache/blockfence/logs/blockfence.log)

    Returns:
        Path of the log file in use

    Example:
        BLOCKFENCE_LOG_LEVEL=DEBUG blockfence edit notes.md
        tail -f ~/.cache/blockfence/logs/blockfence.log | jq .
    """
    log_file = log_file or default_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    log_level = os.environ.get("BLOCKFENCE_LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=log_file.open("a")),
        cache_logger_on_first_use=True,
    )
    return log_file


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("mode_activated", region_index=0, language="clojure")
    """
    return structlog.get_logger(name)
