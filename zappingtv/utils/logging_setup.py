"""Logging setup for ZappingTV with file and optional console output"""

import logging
import logging.handlers
import sys
from pathlib import Path

from zappingtv.config import LoggingConfig


def setup_logging(
    log_level: str = "INFO",
    log_file: str | Path | None = None,
    log_to_console: bool = False,
    clear: bool = True,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 2,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Set up logging for ZappingTV.

    Log records go to a rotating file. Console output is off by default
    because it would interleave with prompts and the player's own output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to the log file; no file logging when None
        log_to_console: Whether to also log to stdout
        clear: Truncate the log file first, so it only covers this run
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep
        log_format: Custom log format string

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    detailed_formatter = logging.Formatter(
        log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
        )
        root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if clear:
            log_path.write_text("", encoding="utf-8")

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    # Keep httpx request lines out of INFO logs
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    root_logger.info(f"ZappingTV logging initialized - Level: {log_level}")
    if log_file is not None:
        root_logger.info(f"Log file: {log_file}")

    return root_logger


def setup_from_config(config: LoggingConfig, log_level: str | None = None) -> logging.Logger:
    """Set up logging from the ``logging`` config section."""
    return setup_logging(
        log_level=log_level or config.level,
        log_file=config.file,
        log_to_console=config.console,
        clear=config.clear_on_startup,
        max_bytes=config.max_bytes,
        backup_count=config.backup_count,
        log_format=config.format,
    )


def log_exception(
    logger: logging.Logger, exception: Exception, message: str = "Exception occurred"
):
    """
    Log an exception with full traceback.

    Args:
        logger: Logger instance to use
        exception: Exception to log
        message: Additional context message
    """
    logger.error(f"{message}: {exception!s}", exc_info=True)
