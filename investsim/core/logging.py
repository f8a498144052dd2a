"""Logging for investsim.

Engine modules only emit structured events through structlog; they never
install handlers. Handlers, levels and renderers belong to the host
process. An application embedding the engine may call configure_logging()
once from its entry point for plain stdout output, or configure structlog
itself and the engine's events follow that configuration.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from investsim.core.exceptions import ConfigurationError
from investsim.core.settings import get_settings

ENGINE_LOGGER = "investsim"

_configured: bool = False


def _processors(json_output: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def configure_logging(
    level: str | None = None,
    json_output: bool | None = None,
) -> structlog.BoundLogger:
    """Route engine events through stdlib logging. Opt-in, idempotent.

    The level is set on the ``investsim`` logger only. A stdout handler is
    attached to the root logger only when the root has none, so handlers
    installed by the host are kept.

    Args:
        level: Log level name. Defaults to settings.log_level.
        json_output: Render JSON instead of plain key=value lines.
            Defaults to settings.json_logs.

    Raises:
        ConfigurationError: If level is not a known log level name.
    """
    global _configured

    if _configured:
        return get_logger(ENGINE_LOGGER)

    if level is None or json_output is None:
        settings = get_settings()
        level = level or settings.log_level
        json_output = settings.json_logs if json_output is None else json_output

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")

    logging.getLogger(ENGINE_LOGGER).setLevel(numeric_level)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.configure(
        processors=_processors(json_output),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True
    return get_logger(ENGINE_LOGGER)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Lazy structlog logger; configuration is resolved on first use.

    Safe to call at import time: it neither configures logging nor reads
    settings.
    """
    if name:
        return structlog.get_logger(name, logger_name=name)
    return structlog.get_logger()
