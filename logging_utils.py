"""Shared logging configuration helpers."""

from __future__ import annotations

import logging
import os
import sys
from typing import Iterable

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS.keys())

# Environment variable consulted when no explicit --log-level is given
LOG_LEVEL_ENV_VAR = "PXE_LOG_LEVEL"


def add_logging_args(parser) -> None:
    """Add standard logging options to an argparse parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help=f"Set log verbosity (default: ${LOG_LEVEL_ENV_VAR} or info)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v shows per-operation debug output)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Reduce log verbosity (use -qq for errors only)",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Resolve a numeric log level.

    Precedence: explicit ``log_level``, then -v/-q modifiers, then the
    PXE_LOG_LEVEL environment variable, then INFO.
    """
    if log_level:
        return LOG_LEVELS[log_level.lower()]

    offset = verbose - quiet
    if offset >= 1:
        return logging.DEBUG
    if offset == -1:
        return logging.WARNING
    if offset <= -2:
        return logging.ERROR

    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().lower()
    return LOG_LEVELS.get(env_level, logging.INFO)


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging on stderr and return the active level.

    stdout is left to command output (histogram tables, JSON reports).
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    return level
