"""Structured logging setup for witstream."""

import structlog
from pathlib import Path
from typing import Any
import os


VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def resolve_log_level(default: str = "INFO") -> str:
    """Read WITSTREAM_LOG_LEVEL, falling back to the default on unknown values."""
    log_level = os.environ.get("WITSTREAM_LOG_LEVEL", default).upper()
    if log_level not in VALID_LEVELS:
        log_level = default
    return log_level


def configure_logging(log_file: Path | None = None) -> None:
    """
    Configure structlog for JSON logging to ~/.cache/witstream/logs/witstream.log.

    Log level can be controlled via WITSTREAM_LOG_LEVEL environment variable:
    - Set to "DEBUG" to see every raw frame received from the API
    - Defaults to "INFO" if not set

    Log levels:
    - DEBUG: Request parameters, raw frames, decoded events, skipped tags
    - INFO: Request start/completion with event counts
    - WARNING: Truncated streams discarded at end of body
    - ERROR: API errors, transport failures, decode failures

    The library itself never calls this; the CLI does. Applications embedding
    the client configure structlog however they like.

    Example:
        WITSTREAM_LOG_LEVEL=DEBUG witstream speech sample.wav --encoding wav
        tail -f ~/.cache/witstream/logs/witstream.log | jq .
    """
    if log_file is None:
        log_dir = Path.home() / ".cache" / "witstream" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "witstream.log"

    log_level = resolve_log_level()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("wit_request_started", endpoint="speech")
    """
    return structlog.get_logger(name)
