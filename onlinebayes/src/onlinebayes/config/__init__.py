"""onlinebayes configuration package.

What:
  Provide one import surface for the parameter models used by features and
  the runtime configuration loader.

Why:
  Features import their parameter types from here while applications load
  ``onlinebayes.yaml``; keeping ``__all__`` explicit documents which helpers
  are supported.

Interfaces:
  - MultinomialParameters / GaussianParameters / ModelParameters: feature and
    model defaults.
  - RuntimeConfig / ValidationError: the configuration document and its
    validator error.
  - load_runtime_config / get_runtime_config / reset_runtime_config /
    parse_runtime_config: locate and cache ``onlinebayes.yaml``.
  - build_model / make_rng: turn a configuration into a model and a random
    source.
"""

from .loader import (
    ConfigLoadError,
    RuntimeConfigError,
    build_model,
    get_runtime_config,
    load_runtime_config,
    make_rng,
    parse_runtime_config,
    reset_runtime_config,
)
from .schema import (
    GaussianParameters,
    LoggingConfig,
    ModelParameters,
    MultinomialParameters,
    RuntimeConfig,
    ValidationError,
)

__all__ = [
    "ConfigLoadError",
    "RuntimeConfigError",
    "build_model",
    "get_runtime_config",
    "load_runtime_config",
    "make_rng",
    "parse_runtime_config",
    "reset_runtime_config",
    "GaussianParameters",
    "LoggingConfig",
    "ModelParameters",
    "MultinomialParameters",
    "RuntimeConfig",
    "ValidationError",
]
