"""Configuration de logging basée sur structlog.

Objectif du module
------------------
- Fournir des logs structurés lisibles en développement.
- Propager le contexte de requête (request_id) via les contextvars de structlog.
"""

import logging
import sys

import structlog


def setup_logging(level: str | int = "INFO") -> None:
    """Configure structlog pour produire des logs détaillés et filtrables.

    Le niveau accepte un nom (``"DEBUG"``) ou une constante du module ``logging``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
