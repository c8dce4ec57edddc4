"""Observability helpers: structured, correlation-aware logging."""

from __future__ import annotations

from postgate.observability.logging import CorrelationIdFilter, configure_logging

__all__ = [
    "CorrelationIdFilter",
    "configure_logging",
]
