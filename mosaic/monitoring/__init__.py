"""
Observability for mosaic-evolution.

Structured loguru logging for evolution runs.

Author: Mosaic Team
License: MIT
"""

from .logging_config import (
    LogContext,
    configure_logging,
    log_error,
    log_evolution_complete,
    log_evolution_generation,
    log_evolution_start,
    log_migration,
)

__all__ = [
    "LogContext",
    "configure_logging",
    "log_error",
    "log_evolution_complete",
    "log_evolution_generation",
    "log_evolution_start",
    "log_migration",
]
