"""Logging setup: structlog events rendered through stdlib handlers on stderr."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

DEFAULT_LEVEL = "WARNING"

# Third-party loggers that are noisy below WARNING.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def resolve_level(level: str | None = None) -> str:
    """Explicit *level*, else ``PUBSENTINEL_LOG_LEVEL``, else WARNING.

    The CLI prints its report on stdout, so engine INFO events stay hidden
    unless asked for.
    """
    return (level or os.environ.get("PUBSENTINEL_LOG_LEVEL") or DEFAULT_LEVEL).upper()


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib logging to one stderr handler.

    ``PUBSENTINEL_LOG_FORMAT`` picks ``console`` (default) or ``json``.
    """
    log_level = resolve_level(level)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers = {name: {"level": "WARNING"} for name in _QUIET_LOGGERS}
    loggers["pubsentinel"] = {"level": log_level}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(os.environ.get("PUBSENTINEL_LOG_FORMAT", "console").lower()),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": loggers,
        }
    )
