"""Logger configuration for the worklog engine.

Engine code logs with structured keyword arguments:

    logger.info("Distribution summary", target_seconds=28800, actual_seconds=28800)

On the console those fields are rendered as trailing key=value pairs. With
LOG_JSON=true every record is emitted as one JSON object per line instead,
fields included, for log shipping.
"""

import sys
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from worklog_engine.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def with_fields(base_format: str) -> Callable[[dict], str]:
    """Build a loguru format function that appends bound fields as key=value."""

    def formatter(record: dict) -> str:
        fields = " ".join(f"{key}={{extra[{key}]}}" for key in record["extra"])
        if fields:
            return f"{base_format} | {fields}\n{{exception}}"
        return f"{base_format}\n{{exception}}"

    return formatter


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    json_logs: bool | None = None,
) -> None:
    """Configure loguru logger with console and optional file output.

    Args:
        level: Logging level. Defaults to LOG_LEVEL.
        log_file: Optional path to log file. Defaults to LOG_FILE; console only if unset.
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
        json_logs: Emit JSON lines instead of text. Defaults to LOG_JSON.
    """
    level = level or settings.log_level
    log_file = log_file if log_file is not None else settings.log_file
    json_logs = settings.log_json if json_logs is None else json_logs

    logger.remove()

    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, format=with_fields(CONSOLE_FORMAT), level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=with_fields(FILE_FORMAT),
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=json_logs,
            backtrace=True,
            diagnose=False,
        )

    logger.debug("Logger initialized", level=level, log_file=log_file, json_logs=json_logs)
