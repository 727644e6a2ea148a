"""Logging configuration for sast-bench.

Every module logs under the ``sast_bench`` namespace through a single
RichHandler sharing the CLI console, so log lines and tables interleave
correctly during evaluate and summarize sweeps.
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from sast_bench.console import console as default_console

LOGGER_NAME = "sast_bench"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(verbose: bool = False, quiet: bool = False, log_level: str | None = None) -> int:
    """Map the -v/-q/--log-level options to a logging level.

    An explicit ``log_level`` wins; otherwise verbose gives DEBUG, quiet
    gives WARNING and the default is INFO.

    Raises:
        ValueError: If ``log_level`` is not one of LOG_LEVELS
    """
    if log_level:
        if log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {log_level}")
        return logging.getLevelName(log_level.upper())
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_level: str | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Install the sast-bench log handler.

    Calling it again replaces the previous handler.

    Returns:
        The ``sast_bench`` root logger
    """
    level = resolve_level(verbose=verbose, quiet=quiet, log_level=log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=console or default_console,
        show_time=False,
        show_path=level == logging.DEBUG,
        rich_tracebacks=True,
        tracebacks_suppress=[click],
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, nested under the ``sast_bench`` namespace."""
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
