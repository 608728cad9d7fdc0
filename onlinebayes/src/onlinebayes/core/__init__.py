"""Aggregated exports for the classifier core.

What:
  Expose the model, its input types, the feature variants and the error
  hierarchy from one namespace while deferring the imports until a name is
  used.

Why:
  The feature modules pull in NumPy and the parameter schema. Lazy access
  keeps ``import onlinebayes.core.errors`` cheap and avoids import cycles
  between the core and the configuration package.

How:
  ``__all__`` lists the public names and ``__getattr__`` imports the owning
  submodule on first access.

Interfaces:
  ``Model``, ``Inputs``, ``Update``, ``Text``, ``Categorical``, ``Gaussian``,
  ``Multinomial``, ``StreamingEstimator``, ``count_words``,
  ``OnlineBayesError``, ``InputValidationError``, ``ModelError``,
  ``log_beta``, ``log_student_t``.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "Model",
    "Inputs",
    "Update",
    "Text",
    "Categorical",
    "Gaussian",
    "Multinomial",
    "StreamingEstimator",
    "count_words",
    "OnlineBayesError",
    "InputValidationError",
    "ModelError",
    "log_beta",
    "log_student_t",
]


def __getattr__(name: str) -> Any:
    """Resolve public names lazily.

    Raises:
      AttributeError: If ``name`` is not part of the public surface.
    """

    if name in {"Model", "Inputs", "Update"}:
        from . import model

        return getattr(model, name)
    if name in {"Text", "Categorical", "Gaussian", "Multinomial", "StreamingEstimator", "count_words"}:
        from . import features

        return getattr(features, name)
    if name in {"OnlineBayesError", "InputValidationError", "ModelError"}:
        from . import errors

        return getattr(errors, name)
    if name in {"log_beta", "log_student_t"}:
        from . import mathutil

        return getattr(mathutil, name)
    raise AttributeError(name)
