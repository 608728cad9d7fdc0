"""
Module: onlinebayes.__init__

What:
  Online Bayesian naive Bayes classification over text, categorical and
  gaussian features, with incremental updates and a versioned persisted
  state.

Interfaces:
  - Model / Inputs / Update: the classifier and its input records.
  - config: parameter models and the ``onlinebayes.yaml`` loader.
  - state: JSON persistence of models.
  - collection, core, utils: building blocks and logging.

Invariants:
  - Every public value is immutable; updates return new values.
"""

from .core.model import Inputs, Model, Update

__all__ = [
    "Model",
    "Inputs",
    "Update",
    "collection",
    "config",
    "core",
    "state",
    "utils",
]
