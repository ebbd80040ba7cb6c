"""Logging setup shared by the web server and the headless runner.

Everything logs through ``angler.*`` and ``backend.*`` loggers. Web mode
aligns uvicorn's loggers with ours. Headless mode runs hours of auto-play in
seconds, so the loggers that report every cast, catch and sale are held at
WARNING unless DEBUG was asked for; the periodic progress lines and the final
summary from ``angler.headless`` stay visible.
"""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "ANGLER_LOG_LEVEL"

WEB_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HEADLESS_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

BACKEND_LOGGERS = ("angler.backend", "backend")
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
HEADLESS_LOGGER = "angler.headless"
# Log once per cast, catch, sale or mission
PER_CAST_LOGGERS = ("angler.session", "angler.shop", "angler.missions")


def resolve_level(level: str | None = None) -> int:
    """Turn ``level`` (or ``ANGLER_LOG_LEVEL``) into a logging level; INFO if unset or unknown."""
    raw_level = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if not raw_level:
        return logging.INFO
    resolved = logging.getLevelName(raw_level.upper())
    if not isinstance(resolved, int):
        logging.getLogger(__name__).warning("Unknown log level %r, using INFO", raw_level)
        return logging.INFO
    return resolved


def configure_logging(*, level: str | None = None, headless: bool = False) -> logging.Logger:
    """Configure application logging for one run mode.

    Args:
        level: Optional explicit log level name. Falls back to
            ``ANGLER_LOG_LEVEL`` or INFO.
        headless: Configure for a headless auto-play run instead of the server.

    Returns:
        ``angler.headless`` in headless mode, otherwise ``angler.backend``.
    """
    resolved_level = resolve_level(level)
    logging.basicConfig(
        level=resolved_level,
        format=HEADLESS_FORMAT if headless else WEB_FORMAT,
        datefmt=DEFAULT_DATEFMT,
    )
    logging.getLogger("angler").setLevel(resolved_level)

    if headless:
        per_cast_level = resolved_level if resolved_level <= logging.DEBUG else logging.WARNING
        for logger_name in PER_CAST_LOGGERS:
            logging.getLogger(logger_name).setLevel(per_cast_level)
        app_logger = logging.getLogger(HEADLESS_LOGGER)
        app_logger.setLevel(resolved_level)
    else:
        for logger_name in BACKEND_LOGGERS + UVICORN_LOGGERS:
            logging.getLogger(logger_name).setLevel(resolved_level)
        app_logger = logging.getLogger(BACKEND_LOGGERS[0])

    app_logger.debug("Logging configured at %s", logging.getLevelName(resolved_level))
    return app_logger
