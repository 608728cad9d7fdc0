"""Categorical feature: one-of-K values such as user ids or countries."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Optional, Sequence, Tuple

import numpy as np

from ...collection import Counter
from ...config.schema import MultinomialParameters
from .multinomial import Multinomial


@dataclass(frozen=True)
class Categorical:
    """Adapter turning a single category into a one-element :class:`Counter`.

    All statistics live in the wrapped :class:`Multinomial`; parameters are
    forwarded untouched, ``None`` included.
    """

    delegate: Multinomial = field(default_factory=Multinomial)

    @classmethod
    def from_parameters(cls, parameters: MultinomialParameters) -> "Categorical":
        return cls(Multinomial(parameters))

    @property
    def parameters(self) -> MultinomialParameters:
        return self.delegate.parameters

    def log_posterior_predictive(
        self,
        outcomes: AbstractSet[str],
        value: str,
        parameters: Optional[MultinomialParameters] = None,
    ) -> Dict[str, float]:
        return self.delegate.log_posterior_predictive(outcomes, Counter.of(value), parameters)

    def batch_update(
        self,
        updates: Sequence[Tuple[str, str]],
        parameters: Optional[MultinomialParameters] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Categorical":
        categories = [(outcome, Counter.of(value)) for outcome, value in updates]
        return Categorical(self.delegate.batch_update(categories, parameters, rng))

    def with_parameters(self, parameters: MultinomialParameters) -> "Categorical":
        return Categorical(self.delegate.with_parameters(parameters))
