"""Structured logging: structlog events rendered through stdlib handlers."""

from __future__ import annotations

import logging
import re
import sys

import structlog

from pharosbet_core.config.schema import LoggingConfig

# One line per RPC request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_TX_HASH = re.compile(r"^0x[0-9a-fA-F]{64}$")


def shorten_tx_hashes(_logger, _method, event_dict: dict) -> dict:
    """Console only: full transaction hashes are shortened to 0x1234...abcd."""
    for key, value in event_dict.items():
        if isinstance(value, str) and _TX_HASH.match(value):
            event_dict[key] = f"{value[:6]}...{value[-4:]}"
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _render_chain(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "console":
        return [shorten_tx_hashes, structlog.dev.ConsoleRenderer()]
    return [structlog.processors.JSONRenderer(default=str)]


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog and stdlib records (httpx, uvicorn) to one stderr handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for production, "console" for development.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers are created before setup_logging runs
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(log_format),
            ],
        )
    )

    level_num = logging.getLevelName(level.upper())
    if not isinstance(level_num, int):
        level_num = logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_num)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level_num, logging.WARNING))


def configure_logging(config: LoggingConfig) -> None:
    setup_logging(level=config.level, log_format=config.format)


def get_logger(name: str | None = None, **initial_context) -> structlog.stdlib.BoundLogger:
    """Named logger, optionally pre-bound with context (market_id, account, ...)."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger
