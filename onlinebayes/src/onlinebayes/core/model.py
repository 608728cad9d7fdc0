"""onlinebayes.core.model

What:
  Combine an outcome prior with named text, categorical and gaussian features
  into a Bayesian naive Bayes classifier that can be updated online.

Why:
  Callers need ``p(outcome | inputs, D)`` over mixed inputs without
  retraining from scratch whenever new labelled data arrives. Integrating out
  every estimated parameter keeps predictions sane with little data.

How:
  - The prior is ``log(prior_pseudo_count + prior_counts[o])``; the shared
    normaliser is dropped because it is constant across outcomes.
  - Each input whose name matches a feature of the same kind adds that
    feature's log posterior predictive. Unknown names are ignored.
  - Scores are shifted by their maximum before exponentiation and then
    normalised, as in a numerically stable softmax.
  - Updates are regrouped per feature name and handed to the feature's
    ``batch_update`` in one call.

Interfaces:
  :class:`Inputs`, :class:`Update`, :class:`Model`.

Invariants & Safety:
  - Models are immutable; every update returns a new :class:`Model` sharing
    untouched features with the original.
  - :meth:`Model.predict` only reports outcomes present in ``prior_counts``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

import numpy as np

from ..config.schema import ModelParameters
from ..utils.logging import get_logger
from .errors import InputValidationError, ModelError
from .features import AnyFeature, Categorical, Gaussian, Text

_LOGGER = get_logger("onlinebayes.model")

F = TypeVar("F", Text, Categorical, Gaussian)
V = TypeVar("V")


@dataclass(frozen=True)
class Inputs:
    """Named feature values of one observation.

    Attributes:
      text: Feature name to raw text.
      categorical: Feature name to category.
      gaussian: Feature name to number.
    """

    text: Mapping[str, str] = field(default_factory=dict)
    categorical: Mapping[str, str] = field(default_factory=dict)
    gaussian: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Update:
    """A labelled observation."""

    inputs: Inputs
    outcome: str


@dataclass(frozen=True)
class _Kind(Generic[F, V]):
    """Wiring of one feature kind: how to read values, parameters and create features."""

    values: Callable[[Inputs], Mapping[str, V]]
    parameters: Callable[[ModelParameters], Mapping[str, object]]
    create: Callable[[], F]


_TEXT: _Kind = _Kind(lambda i: i.text, lambda p: p.text, Text)
_CATEGORICAL: _Kind = _Kind(lambda i: i.categorical, lambda p: p.categorical, Categorical)
_GAUSSIAN: _Kind = _Kind(lambda i: i.gaussian, lambda p: p.gaussian, Gaussian)


class Model:
    """Bayesian naive Bayes classifier over named features.

    What:
      Hold outcome counts and three collections of named features, predict
      outcome probabilities and produce updated models.

    Why:
      New features and outcomes appear on the fly in streaming settings. A
      feature mentioned for the first time in an update is simply created,
      and a feature missing from an input is left out of the product.

    How:
      The default log prior is computed once at construction; predictions
      with a non-default ``prior_pseudo_count`` recompute it.

    Args:
      prior_counts: How often each outcome has been observed.
      text_features: Named :class:`Text` features.
      categorical_features: Named :class:`Categorical` features.
      gaussian_features: Named :class:`Gaussian` features.
      prior_pseudo_count: Added to every outcome count in the prior.

    Raises:
      InputValidationError: If ``prior_pseudo_count + count`` is not positive
        for some outcome.
    """

    __slots__ = (
        "_prior_counts",
        "_text_features",
        "_categorical_features",
        "_gaussian_features",
        "_prior_pseudo_count",
        "_log_prior",
    )

    def __init__(
        self,
        prior_counts: Optional[Mapping[str, int]] = None,
        text_features: Optional[Mapping[str, Text]] = None,
        categorical_features: Optional[Mapping[str, Categorical]] = None,
        gaussian_features: Optional[Mapping[str, Gaussian]] = None,
        prior_pseudo_count: int = 0,
    ) -> None:
        self._prior_counts = MappingProxyType(dict(prior_counts or {}))
        for outcome, count in self._prior_counts.items():
            if prior_pseudo_count + count <= 0:
                raise InputValidationError(
                    f"prior count {count} for '{outcome}' with pseudo count {prior_pseudo_count} is not positive"
                )
        self._text_features = MappingProxyType(dict(text_features or {}))
        self._categorical_features = MappingProxyType(dict(categorical_features or {}))
        self._gaussian_features = MappingProxyType(dict(gaussian_features or {}))
        self._prior_pseudo_count = prior_pseudo_count
        self._log_prior = self._compute_log_prior(prior_pseudo_count)

    @property
    def prior_counts(self) -> Mapping[str, int]:
        return self._prior_counts

    @property
    def text_features(self) -> Mapping[str, Text]:
        return self._text_features

    @property
    def categorical_features(self) -> Mapping[str, Categorical]:
        return self._categorical_features

    @property
    def gaussian_features(self) -> Mapping[str, Gaussian]:
        return self._gaussian_features

    @property
    def prior_pseudo_count(self) -> int:
        return self._prior_pseudo_count

    @property
    def outcomes(self) -> FrozenSet[str]:
        return frozenset(self._prior_counts)

    def predict(self, inputs: Inputs, parameters: Optional[ModelParameters] = None) -> Dict[str, float]:
        """Return ``p(outcome | inputs, D)`` for every known outcome.

        What:
          Apply Bayes' rule with the naive independence assumption across the
          features named in ``inputs``.

        Why:
          ``p(inputs | D)`` is identical for all outcomes, so it can be
          ignored until the final normalisation.

        How:
          Sum the log prior and every matching feature's log posterior
          predictive, subtract the maximum, exponentiate and normalise.

        Args:
          inputs: Feature values to classify.
          parameters: Per-call parameter overrides. Only the named features and
            ``prior_pseudo_count`` are affected.

        Returns:
          Outcome probabilities summing to one, or ``{}`` when no outcome has
          been observed.

        Raises:
          ModelError: If a feature scores a different outcome set.
        """

        if not self._prior_counts:
            return {}
        if parameters is None:
            scores = dict(self._log_prior)
        else:
            scores = self._compute_log_prior(parameters.prior_pseudo_count)
        outcomes = frozenset(scores)
        for kind, features in self._kinds():
            values = kind.values(inputs)
            overrides = kind.parameters(parameters) if parameters is not None else {}
            for name, value in values.items():
                feature = features.get(name)
                if feature is None:
                    continue
                log_predictive = feature.log_posterior_predictive(outcomes, value, overrides.get(name))
                if log_predictive.keys() != outcomes:
                    raise ModelError(
                        f"feature '{name}' scored outcomes {sorted(log_predictive)}, expected {sorted(outcomes)}"
                    )
                for outcome, score in log_predictive.items():
                    scores[outcome] += score
        return _normalise(scores)

    def add(
        self,
        update: Update,
        parameters: Optional[ModelParameters] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Model":
        return self.batch_add([update], parameters, rng)

    def batch_add(
        self,
        updates: Sequence[Update],
        parameters: Optional[ModelParameters] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Model":
        """Return a new model with all ``updates`` added.

        Args:
          updates: Labelled observations.
          parameters: Per-name overrides passed to each feature's
            ``batch_update``; the model's defaults are kept.
          rng: Random source for stochastic vocabulary admission, shared by
            every feature in the batch.

        Returns:
          The updated :class:`Model`, keeping ``prior_pseudo_count``.
        """

        prior_counts = dict(self._prior_counts)
        for update in updates:
            prior_counts[update.outcome] = prior_counts.get(update.outcome, 0) + 1

        updated: List[Dict[str, AnyFeature]] = []
        touched = 0
        for kind, features in self._kinds():
            merged = dict(features)
            grouped = _group(updates, kind.values)
            overrides = kind.parameters(parameters) if parameters is not None else {}
            for name, pairs in grouped.items():
                feature = merged.get(name)
                if feature is None:
                    feature = kind.create()
                merged[name] = feature.batch_update(pairs, overrides.get(name), rng)
            touched += len(grouped)
            updated.append(merged)

        _LOGGER.debug(
            "batch_added",
            updates=len(updates),
            outcomes=len(prior_counts),
            features=touched,
        )
        text, categorical, gaussian = updated
        return Model(prior_counts, text, categorical, gaussian, self._prior_pseudo_count)  # type: ignore[arg-type]

    def with_parameters(self, parameters: ModelParameters) -> "Model":
        """Return a model whose features default to ``parameters``.

        Features named in ``parameters`` but not yet present are created empty
        so the parameters apply once data arrives.
        """

        updated: List[Dict[str, AnyFeature]] = []
        for kind, features in self._kinds():
            merged = dict(features)
            for name, params in kind.parameters(parameters).items():
                feature = merged.get(name)
                if feature is None:
                    feature = kind.create()
                merged[name] = feature.with_parameters(params)
            updated.append(merged)
        text, categorical, gaussian = updated
        return Model(
            self._prior_counts, text, categorical, gaussian, parameters.prior_pseudo_count  # type: ignore[arg-type]
        )

    def _kinds(self) -> Tuple[Tuple[_Kind, Mapping[str, AnyFeature]], ...]:
        return (
            (_TEXT, self._text_features),
            (_CATEGORICAL, self._categorical_features),
            (_GAUSSIAN, self._gaussian_features),
        )

    def _compute_log_prior(self, prior_pseudo_count: int) -> Dict[str, float]:
        return {outcome: math.log(prior_pseudo_count + count) for outcome, count in self._prior_counts.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return (
            dict(self._prior_counts) == dict(other._prior_counts)
            and dict(self._text_features) == dict(other._text_features)
            and dict(self._categorical_features) == dict(other._categorical_features)
            and dict(self._gaussian_features) == dict(other._gaussian_features)
            and self._prior_pseudo_count == other._prior_pseudo_count
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Model(outcomes={sorted(self._prior_counts)}, text={sorted(self._text_features)}, "
            f"categorical={sorted(self._categorical_features)}, gaussian={sorted(self._gaussian_features)}, "
            f"prior_pseudo_count={self._prior_pseudo_count})"
        )


def _group(updates: Sequence[Update], values: Callable[[Inputs], Mapping[str, V]]) -> Dict[str, List[Tuple[str, V]]]:
    """Regroup updates into ``name -> [(outcome, value), ...]`` in first-seen order."""

    grouped: Dict[str, List[Tuple[str, V]]] = {}
    for update in updates:
        for name, value in values(update.inputs).items():
            grouped.setdefault(name, []).append((update.outcome, value))
    return grouped


def _normalise(scores: Mapping[str, float]) -> Dict[str, float]:
    max_score = max(scores.values())
    exp_scores = {outcome: math.exp(score - max_score) for outcome, score in scores.items()}
    norm = sum(exp_scores.values())
    return {outcome: value / norm for outcome, value in exp_scores.items()}


__all__ = ["Inputs", "Update", "Model"]
