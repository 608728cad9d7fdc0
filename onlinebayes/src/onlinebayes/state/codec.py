"""onlinebayes.state.codec

What:
  Convert a :class:`Model` to and from its persisted :class:`ModelState`
  layout, and to and from JSON bytes.

Why:
  Models are trained once and served from other processes. A versioned,
  validated layout lets a loader refuse payloads written by an incompatible
  release instead of silently mis-reading counts.

How:
  - :func:`loads` decodes JSON, checks ``modelVersion`` before anything else,
    validates the layout with pydantic and then rebuilds every feature through
    its invariant-checking constructor.
  - :func:`dumps` serialises the camelCase layout with pydantic.

Interfaces:
  :func:`to_state`, :func:`from_state`, :func:`dumps`, :func:`loads`,
  :data:`MODEL_VERSION`, :class:`StateLoadError`, :class:`StateVersionError`.

Invariants & Safety:
  - A version mismatch always raises :class:`StateVersionError`, whatever else
    is wrong with the payload.
  - Every other malformed payload raises :class:`StateLoadError`.
"""
from __future__ import annotations

import json
from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from ..collection import SparseIntVector
from ..config.schema import GaussianParameters, MultinomialParameters
from ..core.errors import InputValidationError, OnlineBayesError
from ..core.features import Categorical, Gaussian, Multinomial, StreamingEstimator, Text
from ..core.model import Model
from ..utils.logging import get_logger
from .schema import (
    GaussianState,
    ModelState,
    MultinomialState,
    SparseIntVectorState,
    StreamingEstimatorState,
)

MODEL_VERSION = 3

_LOGGER = get_logger("onlinebayes.state")


class StateLoadError(OnlineBayesError):
    """Raised when a persisted model cannot be decoded or validated."""


class StateVersionError(StateLoadError):
    """Raised when a persisted model was written with another ``modelVersion``."""


def _multinomial_state(multinomial: Multinomial) -> MultinomialState:
    params = multinomial.parameters
    features = {}
    for token, vector in multinomial.features.items():
        indices, values = vector.to_lists()
        features[token] = SparseIntVectorState(indices=indices, values=values)
    return MultinomialState(
        include_feature_probability=params.include_feature_probability,
        pseudo_count=params.pseudo_count,
        outcome_index=dict(multinomial.outcome_index),
        features=features,
    )


def _gaussian_state(gaussian: Gaussian) -> GaussianState:
    params = gaussian.parameters
    return GaussianState(
        mu0=params.mu0,
        nu=params.nu,
        beta=params.beta,
        alpha=params.alpha,
        estimators={
            outcome: StreamingEstimatorState(count=est.count, mean=est.mean, m2=est.m2)
            for outcome, est in gaussian.estimators.items()
        },
    )


def to_state(model: Model) -> ModelState:
    """Describe ``model`` with the persisted layout."""

    return ModelState(
        model_version=MODEL_VERSION,
        prior_counts=dict(model.prior_counts),
        prior_pseudo_count=model.prior_pseudo_count,
        text_features={name: _multinomial_state(f.delegate) for name, f in model.text_features.items()},
        categorical_features={name: _multinomial_state(f.delegate) for name, f in model.categorical_features.items()},
        gaussian_features={name: _gaussian_state(f) for name, f in model.gaussian_features.items()},
    )


def _multinomial(state: MultinomialState) -> Multinomial:
    params = MultinomialParameters(
        include_feature_probability=state.include_feature_probability,
        pseudo_count=state.pseudo_count,
    )
    features = {
        token: SparseIntVector.from_arrays(vector.indices, vector.values)
        for token, vector in state.features.items()
    }
    return Multinomial(params, state.outcome_index, features)


def _gaussian(state: GaussianState) -> Gaussian:
    params = GaussianParameters(mu0=state.mu0, nu=state.nu, beta=state.beta, alpha=state.alpha)
    estimators = {
        outcome: StreamingEstimator(est.count, est.mean, est.m2) for outcome, est in state.estimators.items()
    }
    return Gaussian(params, estimators)


def _check_version(version: Any) -> None:
    if version != MODEL_VERSION:
        _LOGGER.error("state_version_mismatch", expected=MODEL_VERSION, found=version)
        raise StateVersionError(
            f"this release reads model version {MODEL_VERSION}, payload has version {version!r}"
        )


def from_state(state: ModelState) -> Model:
    """Rebuild a :class:`Model` from a validated layout.

    Raises:
      StateVersionError: If ``state.model_version`` is not :data:`MODEL_VERSION`.
      StateLoadError: If the counts violate a feature invariant.
    """

    _check_version(state.model_version)
    try:
        return Model(
            state.prior_counts,
            {name: Text(_multinomial(f)) for name, f in state.text_features.items()},
            {name: Categorical(_multinomial(f)) for name, f in state.categorical_features.items()},
            {name: _gaussian(f) for name, f in state.gaussian_features.items()},
            state.prior_pseudo_count,
        )
    except (InputValidationError, PydanticValidationError) as exc:
        raise StateLoadError(f"invalid model state: {exc}") from exc


def dumps(model: Model) -> bytes:
    """Serialise ``model`` as UTF-8 JSON bytes."""

    payload = to_state(model).model_dump_json(by_alias=True).encode("utf-8")
    _LOGGER.info("model_dumped", outcomes=len(model.prior_counts), size=len(payload))
    return payload


def loads(payload: Union[bytes, str]) -> Model:
    """Decode JSON produced by :func:`dumps`.

    What:
      Parse, version-check, validate and rebuild a model.

    Why:
      Counts written by another release may follow different semantics;
      refusing them is safer than guessing.

    How:
      The raw ``modelVersion`` field is checked on the decoded JSON before
      pydantic validation, so even an otherwise malformed payload from another
      version reports the version mismatch.

    Raises:
      StateVersionError: On a ``modelVersion`` mismatch.
      StateLoadError: On any other malformed payload.
    """

    try:
        raw = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise StateLoadError(f"model payload is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise StateLoadError("model payload must be a JSON object")
    _check_version(raw.get("modelVersion", raw.get("model_version")))
    try:
        state = ModelState.model_validate(raw)
    except PydanticValidationError as exc:
        raise StateLoadError(f"invalid model state: {exc}") from exc
    model = from_state(state)
    _LOGGER.info("model_loaded", outcomes=len(model.prior_counts))
    return model


__all__ = [
    "MODEL_VERSION",
    "StateLoadError",
    "StateVersionError",
    "to_state",
    "from_state",
    "dumps",
    "loads",
]
