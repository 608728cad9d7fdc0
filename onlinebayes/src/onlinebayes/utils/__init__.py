"""Expose the public utility surface for onlinebayes.

What:
  Re-export the structured logging helpers.

Why:
  Call sites do ``from onlinebayes.utils import get_logger`` without knowing
  the module layout, and the redaction rules can evolve in one place.

Interfaces:
  ``get_logger``, ``set_log_level``, ``get_log_level``, ``JsonLogger``.
"""

from .logging import JsonLogger, get_log_level, get_logger, set_log_level

__all__ = [
    "JsonLogger",
    "get_logger",
    "get_log_level",
    "set_log_level",
]
