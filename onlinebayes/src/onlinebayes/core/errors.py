"""onlinebayes.core.errors

What:
  Define the exception hierarchy raised by the classifier core.

Why:
  Callers need to tell rejected inputs apart from internal consistency
  failures and from persisted-state problems without matching on messages.

How:
  A single :class:`OnlineBayesError` base with narrow subclasses. Input
  validation errors also derive from :class:`ValueError` so generic handlers
  keep working.

Interfaces:
  :class:`OnlineBayesError`, :class:`InputValidationError`,
  :class:`ModelError`.
"""
from __future__ import annotations


class OnlineBayesError(Exception):
    """Base class for every error raised by :mod:`onlinebayes`."""


class InputValidationError(OnlineBayesError, ValueError):
    """Raised when a value handed to the core violates its contract.

    Examples are non-finite gaussian observations, sparse vectors whose
    indices are not strictly ascending, or estimator state with a negative
    sum of squared deviations.
    """


class ModelError(OnlineBayesError):
    """Raised when a model detects an internal inconsistency while predicting."""
