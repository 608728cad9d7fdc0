"""onlinebayes.core.features.gaussian

What:
  Model numeric inputs that roughly follow a normal distribution per outcome
  (ages, amounts, temperatures) with a Normal-Inverse-Gamma conjugate prior.

Why:
  Integrating out the mean and variance yields a Student-t posterior
  predictive, which is much less overconfident than plugging in point
  estimates when an outcome has only a few observations.

How:
  - :class:`StreamingEstimator` keeps ``count``, ``mean`` and ``m2`` per
    outcome using Welford's update, so observations are folded in one at a
    time without revisiting earlier data.
  - :meth:`Gaussian.log_posterior_predictive` derives the posterior
    hyper-parameters and evaluates :func:`log_student_t`.
  - Outcomes with fewer than two samples or zero variance have no usable
    posterior. They receive the lowest score among outcomes that do; when no
    outcome qualifies every outcome scores ``0.0`` and the feature is ignored.

Interfaces:
  :class:`Gaussian`, :class:`StreamingEstimator`.

Invariants & Safety:
  - With the default all-zero hyper-parameters the feature is invariant to
    scaling and shifting the data; non-zero priors break this.
  - A new, data-poor outcome can never score above outcomes with estimated
    distributions.
  - Non-finite observations are rejected with :class:`InputValidationError`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import AbstractSet, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from ...config.schema import GaussianParameters
from ...utils.logging import get_logger
from ..errors import InputValidationError
from ..mathutil import log_student_t

_LOGGER = get_logger("onlinebayes.gaussian")


def _require_finite(value: float, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InputValidationError(f"{what} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        _LOGGER.warning("gaussian_input_rejected", reason=what)
        raise InputValidationError(f"{what} must be finite, got {number!r}")
    return number


@dataclass(frozen=True)
class StreamingEstimator:
    """Running mean and variance of a stream of numbers.

    B. P. Welford (1962), "Note on a method for calculating corrected sums of
    squares and products".

    Attributes:
      count: Number of observations, at least one.
      mean: Running mean.
      m2: Sum of squared deviations from the running mean.
    """

    count: int
    mean: float
    m2: float = 0.0

    def __post_init__(self) -> None:
        if self.count < 1:
            raise InputValidationError("estimator count must be at least 1")
        if not (math.isfinite(self.mean) and math.isfinite(self.m2)) or self.m2 < 0:
            raise InputValidationError("estimator mean and m2 must be finite and m2 non-negative")

    @classmethod
    def of(cls, x: float) -> "StreamingEstimator":
        return cls(1, _require_finite(x, "gaussian observation"), 0.0)

    def add(self, x: float) -> "StreamingEstimator":
        x = _require_finite(x, "gaussian observation")
        count = self.count + 1
        delta = x - self.mean
        mean = self.mean + delta / count
        delta2 = x - mean
        return StreamingEstimator(count, mean, self.m2 + delta * delta2)

    @property
    def variance(self) -> float:
        """Unbiased sample variance, ``0.0`` below two observations."""

        if self.count < 2:
            return 0.0
        return self.m2 / (self.count - 1)

    @property
    def stdev(self) -> float:
        return math.sqrt(self.variance)


@dataclass(frozen=True)
class Gaussian:
    """Per-outcome streaming estimators with a Student-t posterior predictive.

    Attributes:
      parameters: Default prior hyper-parameters, used only when predicting.
      estimators: Outcome to :class:`StreamingEstimator` mapping.
    """

    parameters: GaussianParameters = field(default_factory=GaussianParameters)
    estimators: Mapping[str, StreamingEstimator] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "estimators", MappingProxyType(dict(self.estimators)))

    def with_parameters(self, parameters: GaussianParameters) -> "Gaussian":
        return Gaussian(parameters, self.estimators)

    def batch_update(
        self,
        updates: Sequence[Tuple[str, float]],
        parameters: Optional[GaussianParameters] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Gaussian":
        """Fold every ``(outcome, x)`` into that outcome's estimator.

        ``parameters`` and ``rng`` are accepted for interface compatibility and
        unused. The whole batch is rejected if any value is not finite.
        """

        if not updates:
            return self
        estimators = dict(self.estimators)
        for outcome, x in updates:
            current = estimators.get(outcome)
            estimators[outcome] = current.add(x) if current is not None else StreamingEstimator.of(x)
        return Gaussian(self.parameters, estimators)

    def log_posterior_predictive(
        self,
        outcomes: AbstractSet[str],
        value: float,
        parameters: Optional[GaussianParameters] = None,
    ) -> Dict[str, float]:
        """Student-t log density of ``value`` for each outcome.

        What:
          Score ``value`` against every requested outcome's posterior
          predictive.

        Why:
          Under a Normal-Inverse-Gamma prior the predictive is a Student-t
          with ``2 * alpha'`` degrees of freedom, located at the posterior
          mean.

        How:
          Compute the defined scores, then give every undefined outcome the
          minimum defined score, or ``0.0`` when nothing is defined.

        Raises:
          InputValidationError: If ``value`` is not finite.
        """

        x = _require_finite(value, "gaussian value")
        prior = parameters or self.parameters
        defined: Dict[str, float] = {}
        for outcome in outcomes:
            score = self._log_predictive(outcome, x, prior)
            if score is not None:
                defined[outcome] = score
        fallback = min(defined.values()) if defined else 0.0
        return {outcome: defined.get(outcome, fallback) for outcome in outcomes}

    def _log_predictive(self, outcome: str, x: float, prior: GaussianParameters) -> Optional[float]:
        estimator = self.estimators.get(outcome)
        if estimator is None or estimator.count < 2:
            return None
        sigma = estimator.stdev
        if sigma == 0.0:
            return None
        n = float(estimator.count)
        mu = estimator.mean
        mu0, nu, alpha, beta = prior.mu0, prior.nu, prior.alpha, prior.beta

        post_mu = (nu * mu0 + n * mu) / (nu + n)
        post_nu = nu + n
        post_alpha = alpha + n / 2.0
        # n - 1 matches the unbiased stdev kept by the estimator.
        ss = sigma ** 2 * (n - 1)
        post_beta = beta + ss / 2.0 + n * nu / (n + nu) * (mu - mu0) ** 2 / 2.0
        scale = math.sqrt(post_beta * (post_nu + 1) / (post_alpha * post_nu))
        return log_student_t(x, 2.0 * post_alpha, post_mu, scale)
