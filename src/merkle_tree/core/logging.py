"""
Merkle Tree - Logging Configuration

The package logs through structlog. On import it installs quiet
defaults (configure_library_logging) that route events to stdlib
loggers under ``merkle_tree.*`` and drop anything below LOG_LEVEL,
so nothing reaches stdout unless the application opts in. An
application that wants rendered output calls setup_logging(), or
configures structlog itself before importing the package.
"""

import logging
import sys

import structlog

from merkle_tree.core.config import Settings, settings as default_settings


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _level(settings: Settings) -> int:
    return getattr(logging, settings.LOG_LEVEL.upper())


def configure_library_logging(settings: Settings | None = None) -> bool:
    """
    Install quiet structlog defaults unless structlog is already configured.

    Events below LOG_LEVEL are filtered before rendering; the rest go to
    stdlib loggers, which print nothing until the application adds
    handlers. Loggers are not cached, so a later setup_logging() or
    structlog.configure() by the application still takes effect.

    Returns:
        True if defaults were installed, False if an existing
        configuration was left alone
    """
    if structlog.is_configured():
        return False

    settings = settings or default_settings
    structlog.configure(
        processors=_shared_processors() + [structlog.processors.KeyValueRenderer(key_order=["event"])],
        wrapper_class=structlog.make_filtering_bound_logger(_level(settings)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return True


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structured logging to stdout for applications."""
    settings = settings or default_settings
    use_json = settings.ENV == "production"

    processors = _shared_processors()

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_level(settings),
    )
