"""Console output for the `ama` command line."""

from __future__ import annotations

import logging

import click

PACKAGE_LOGGER = "atmyapp"

_LEVEL_STYLES: dict[int, tuple[str, str]] = {
    logging.DEBUG: ("cyan", "[VERBOSE] "),
    logging.INFO: ("blue", ""),
    logging.WARNING: ("yellow", ""),
    logging.ERROR: ("red", ""),
}


class ClickEchoHandler(logging.Handler):
    """Write log records through `click.secho`, coloured by level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            colour, prefix = _style_for(record.levelno)
            click.secho(
                f"{prefix}{message}", fg=colour, err=record.levelno >= logging.WARNING
            )
        except Exception:  # pylint: disable=broad-exception-caught
            self.handleError(record)


def _style_for(levelno: int) -> tuple[str, str]:
    if levelno >= logging.ERROR:
        return _LEVEL_STYLES[logging.ERROR]
    if levelno >= logging.WARNING:
        return _LEVEL_STYLES[logging.WARNING]
    if levelno >= logging.INFO:
        return _LEVEL_STYLES[logging.INFO]
    return _LEVEL_STYLES[logging.DEBUG]


def configure_console_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single `ClickEchoHandler` to the package logger.

    Repeated calls replace the handler rather than stacking another one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)
    logger.addHandler(ClickEchoHandler())
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
