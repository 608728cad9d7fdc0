"""Contract shared by every feature of the classifier.

A feature estimates ``log p(value | outcome, D)`` for one named input. The
model only relies on the three operations of :class:`Feature`; the concrete
variants are the closed set in :data:`AnyFeature`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, AbstractSet, Dict, Optional, Protocol, Sequence, Tuple, TypeVar, Union

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .categorical import Categorical
    from .gaussian import Gaussian
    from .text import Text

V = TypeVar("V", contravariant=True)
P = TypeVar("P")


class Feature(Protocol[V, P]):
    """Operations every feature variant implements.

    ``parameters=None`` always means "use the feature's default parameters",
    which are set with :meth:`with_parameters`.
    """

    def log_posterior_predictive(
        self,
        outcomes: AbstractSet[str],
        value: V,
        parameters: Optional[P] = None,
    ) -> Dict[str, float]:
        """Return ``log p(value | outcome, D)`` for exactly ``outcomes``.

        Only correct up to an additive constant shared by all outcomes.
        Outcomes the feature never saw get a variant-specific fallback.
        """
        ...

    def batch_update(
        self,
        updates: Sequence[Tuple[str, V]],
        parameters: Optional[P] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Feature[V, P]":
        """Return a new feature with every ``(outcome, value)`` pair added."""
        ...

    def with_parameters(self, parameters: P) -> "Feature[V, P]":
        """Return a new feature using ``parameters`` as its defaults."""
        ...


AnyFeature = Union["Text", "Categorical", "Gaussian"]
