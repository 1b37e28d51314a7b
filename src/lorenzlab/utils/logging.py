from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "[%(command)s] %(levelname)s %(name)s: %(message)s"

# Nested calls inherit the active command name
_current_command: ContextVar[str] = ContextVar("lorenzlab_current_command", default="lorenzlab")

# Third-party loggers that flood DEBUG output (font cache, backend probing)
_NOISY_LOGGERS = ("matplotlib", "PIL")


class _CommandFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.command = getattr(record, "command", None) or _current_command.get()
        return True


def level_for_flags(verbose: bool = False, debug: bool = False) -> int:
    """``--debug`` wins over ``--verbose``; neither means warnings only."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(level: int = logging.WARNING) -> None:
    """
    Attach a stderr handler unless the root logger already has one, then set
    the level. matplotlib and PIL stay at WARNING unless the root level is
    stricter.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(_CommandFilter())
        root.addHandler(handler)
    root.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.captureWarnings(True)


def configure_cli_logging(verbose: bool, debug: bool, command: Optional[str] = None) -> int:
    """Set up logging from the CLI flags and tag records with the subcommand."""
    level = level_for_flags(verbose, debug)
    setup_logging(level)
    if command:
        _current_command.set(command)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name if name is not None else "lorenzlab")
