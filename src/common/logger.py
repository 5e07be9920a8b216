"""Logging utilities with rich console output.

Every module logs through a logger obtained here, so the CLI and the HTTP
service share one console and one format.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Patch accepted")
    logger.warning("Patch rejected: patch_too_large")
    logger.error("Could not persist patch", exc_info=True)
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Status lines go to stdout, log records to stderr
console = Console()
err_console = Console(stderr=True)

# Loggers owned by the HTTP server; they follow the service level
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=err_console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # Keep propagation so pytest caplog sees records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger once at an entry point (CLI or server).

    Args:
        level: Default logging level, overridden by LOG_LEVEL
        log_file: Optional file path to also log to a file
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler(show_time=True))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    for name in _SERVER_LOGGERS:
        logging.getLogger(name).setLevel(level)


def success(message: str) -> None:
    """Print a success line with a green checkmark."""
    console.print(f"[green]✓[/green] {escape(message)}", highlight=False)


def warning(message: str) -> None:
    """Print a warning line with a yellow warning icon."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}", highlight=False)


def error(message: str) -> None:
    """Print an error line with a red X icon to stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False)
