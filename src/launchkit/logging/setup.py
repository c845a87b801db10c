"""
Configuración completa del sistema de logging estructurado.

Tres pipelines independientes:
1. Archivo (JSON) — Si config.file está configurado. Captura todo (DEBUG+).
2. Human handler (stderr) — Solo eventos HUMAN: avisos para el usuario.
3. Console técnico (stderr) — WARNING por defecto, INFO con -v, DEBUG con -vv.

stdout queda reservado para el resultado de cada comando.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig
from .human import HumanLogHandler
from .levels import HUMAN

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "human": HUMAN,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(config: LoggingConfig, quiet: bool = False) -> None:
    """Configura el sistema completo de logging con tres pipelines.

    Args:
        config: Configuración de logging (level, file, verbose)
        quiet: Si True, desactiva human y console handlers (--quiet)
    """
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger captura todo — los handlers filtran por nivel
    logging.root.setLevel(logging.DEBUG)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    # ── Pipeline 1: Archivo JSON ──────────────────────────────────────────
    if config.file:
        file_path = Path(config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(file_path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(file_handler)

    if not quiet:
        # ── Pipeline 2: Human handler ─────────────────────────────────────
        if _LEVELS[config.level] <= HUMAN:
            human_handler = HumanLogHandler(stream=sys.stderr)
            human_handler.addFilter(lambda record: record.levelno == HUMAN)
            logging.root.addHandler(human_handler)

        # ── Pipeline 3: Console técnico ───────────────────────────────────
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_console_level(config))
        console_handler.addFilter(lambda record: record.levelno != HUMAN)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(console_handler)

    # El event_dict viaja intacto hasta los handlers (record.msg)
    structlog.configure(
        processors=shared_processors + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _console_level(config: LoggingConfig) -> int:
    """Nivel del console handler.

    Sin -v  → WARNING, o config.level si es "debug"/"info"/"error"
    -v      → INFO
    -vv+    → DEBUG
    """
    by_verbose = {0: logging.WARNING, 1: logging.INFO}.get(config.verbose, logging.DEBUG)
    configured = _LEVELS[config.level]
    if configured < HUMAN:
        return min(by_verbose, configured)
    if configured > logging.WARNING and config.verbose == 0:
        return configured
    return by_verbose


def get_logger(name: str) -> structlog.BoundLogger:
    """Obtiene un logger estructurado."""
    return structlog.get_logger(name)
