"""Swim meet entries and results import pipeline."""

__version__ = "0.1.0"

from swimcoach.logging import bound_context, configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "bound_context",
]
