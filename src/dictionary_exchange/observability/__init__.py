"""Observability - structured logging."""

from .logger import LogContext, configure_logging, get_context

__all__ = ["LogContext", "configure_logging", "get_context"]
