"""Discovery, parsing and caching of ``onlinebayes.yaml``.

What:
  Locate the runtime configuration, validate it against
  :class:`RuntimeConfig` and turn it into ready-to-train objects: an empty
  :class:`~onlinebayes.core.model.Model` carrying the configured default
  parameters and a seeded random generator.

Why:
  Feature parameters and the admission seed are deployment decisions. Keeping
  them in one YAML document with strict validation lets operators tune a
  model without code changes and makes training runs reproducible.

How:
  Resolve candidate paths from the explicit argument, the
  ``ONLINEBAYES_CONFIG_PATH`` environment variable and the default locations.
  Parse YAML with PyYAML, validate with pydantic and cache the result per
  path. Loading applies the configured log level.

Interfaces:
  :func:`load_runtime_config`, :func:`get_runtime_config`,
  :func:`reset_runtime_config`, :func:`parse_runtime_config`,
  :func:`build_model`, :func:`make_rng`, :class:`ConfigLoadError`,
  :class:`RuntimeConfigError`.

Invariants:
  - Nothing is returned before strict validation succeeds.
  - The cache respects explicit ``reload`` requests and the precedence order
    of candidate paths.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple, Union

import numpy as np
import yaml
from pydantic import ValidationError as _PydanticValidationError

from ..utils.logging import get_logger, set_log_level
from .schema import RuntimeConfig

if TYPE_CHECKING:  # pragma: no cover
    from ..core.model import Model


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class RuntimeConfigError(ConfigLoadError):
    """Raised when ``onlinebayes.yaml`` cannot be located, read or validated.

    What:
      Signal issues specific to runtime configuration discovery or schema
      validation.

    Why:
      Callers embedding the classifier usually want to fall back to defaults
      on a missing file but fail hard on an invalid one; a dedicated type
      lets them tell the two apart from unrelated errors.
    """


_CONFIG_ENV = "ONLINEBAYES_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("onlinebayes.yaml"),
    Path("/etc/onlinebayes/config.yaml"),
)
_RUNTIME_CACHE: Optional[Tuple[Path, RuntimeConfig]] = None

_LOGGER = get_logger("onlinebayes.config")


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield configuration file locations in priority order, without duplicates."""

    seen: set[Path] = set()
    env_path = os.environ.get(_CONFIG_ENV)
    ordered = [path, Path(env_path) if env_path else None, *_DEFAULT_LOCATIONS]
    for entry in ordered:
        if entry is None:
            continue
        candidate = entry.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _parse_config_payload(text: str, source: str) -> dict[str, Any]:
    """Parse YAML text into a mapping ready for validation.

    Raises:
      RuntimeConfigError: If the text is not YAML or not a mapping.
    """

    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise RuntimeConfigError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RuntimeConfigError(f"{source} must contain a mapping at the top-level")
    return payload


def parse_runtime_config(text: str, *, source: str = "<string>") -> RuntimeConfig:
    """Validate configuration ``text`` without touching the cache or log level.

    Args:
      text: YAML document.
      source: Label used in error messages.

    Raises:
      RuntimeConfigError: If the document is malformed or fails validation.
    """

    payload = _parse_config_payload(text, source)
    try:
        return RuntimeConfig.model_validate(payload)
    except _PydanticValidationError as exc:
        raise RuntimeConfigError(f"Invalid configuration in {source}: {exc}") from exc


def _load_runtime_from_path(path: Path) -> RuntimeConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise RuntimeConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    return parse_runtime_config(text, source=str(path))


def load_runtime_config(
    path: Optional[Union[Path, str]] = None,
    *,
    reload: bool = False,
) -> RuntimeConfig:
    """Resolve, parse and cache the runtime configuration.

    What:
      Locate ``onlinebayes.yaml`` using the precedence chain, parse it and
      return a validated :class:`RuntimeConfig`.

    Why:
      Repeated lookups from long-running services should not hit the disk;
      ``reload`` lets tests and operators force a refresh.

    How:
      Consult the cache unless ``reload`` is requested or another path is
      asked for, then try every candidate until one exists. The first
      existing file must validate; later candidates are not consulted.

    Args:
      path: Optional explicit location of the configuration file.
      reload: When ``True`` bypass the cache.

    Returns:
      The validated runtime configuration.

    Raises:
      RuntimeConfigError: If no configuration file exists or the first one
        found is invalid.
    """

    global _RUNTIME_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _RUNTIME_CACHE is not None:
        cached_path, cached_config = _RUNTIME_CACHE
        if requested_path is None or cached_path == requested_path:
            return cached_config

    searched: list[str] = []
    for candidate in _candidate_paths(requested_path):
        if not candidate.exists():
            searched.append(str(candidate))
            continue
        config = _load_runtime_from_path(candidate)
        set_log_level(config.logging.level)
        _RUNTIME_CACHE = (candidate, config)
        _LOGGER.info(
            "runtime_config_loaded",
            path=str(candidate),
            text_features=len(config.parameters.text),
            categorical_features=len(config.parameters.categorical),
            gaussian_features=len(config.parameters.gaussian),
            seeded=config.random_seed is not None,
        )
        return config

    raise RuntimeConfigError(f"Unable to locate onlinebayes.yaml (searched: {', '.join(searched) or '<none>'})")


def get_runtime_config() -> RuntimeConfig:
    """Return the cached runtime configuration, loading it on demand."""

    if _RUNTIME_CACHE is not None:
        return _RUNTIME_CACHE[1]
    return load_runtime_config()


def reset_runtime_config() -> None:
    """Forget the cached configuration so the next access reloads it."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = None


def build_model(config: Optional[RuntimeConfig] = None) -> "Model":
    """Return an empty model whose features default to the configured parameters.

    Uses :func:`get_runtime_config` when ``config`` is omitted.
    """

    from ..core.model import Model

    config = config or get_runtime_config()
    return Model().with_parameters(config.parameters)


def make_rng(config: Optional[RuntimeConfig] = None) -> np.random.Generator:
    """Return the admission random source, seeded from ``random_seed`` when set."""

    config = config or get_runtime_config()
    return np.random.default_rng(config.random_seed)


__all__ = [
    "ConfigLoadError",
    "RuntimeConfigError",
    "load_runtime_config",
    "get_runtime_config",
    "reset_runtime_config",
    "parse_runtime_config",
    "build_model",
    "make_rng",
]
