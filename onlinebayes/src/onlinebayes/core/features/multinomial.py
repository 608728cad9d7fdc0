"""onlinebayes.core.features.multinomial

What:
  Implement the Dirichlet-multinomial feature that backs both text and
  categorical inputs: a sparse ``outcome x token`` count table with an
  incremental update and a closed-form posterior predictive.

Why:
  Vocabularies on real streams are wide and sparse. Scoring a query by
  walking every outcome for every queried token costs ``O(N*W)``; storing one
  sparse vector per token lets the predictive run in ``O(W + N + A*W)`` where
  ``A`` is the average number of outcomes that have seen a token.

How:
  - Updates are inverted from ``outcome -> tokens`` to ``token -> outcomes``
    so every token's sparse vector is merged once per batch.
  - Unseen tokens pass a stochastic admission gate to bound vocabulary
    growth; the random source is injected by the caller.
  - The predictive first scores every requested outcome as if it had seen
    each queried token zero times, then corrects the cells that are actually
    non-zero.

Interfaces:
  :class:`Multinomial`.

Invariants & Safety:
  - ``outcome_index`` maps outcomes to the dense handles ``0..N-1``; handles
    are never reassigned.
  - Every stored vector only references valid handles.
  - Instances are immutable. ``batch_update`` and ``with_parameters`` return
    new instances sharing unchanged vectors with the original.
"""
from __future__ import annotations

import math
from types import MappingProxyType
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ...collection import SparseIntVector
from ...config.schema import MultinomialParameters
from ...utils.logging import get_logger
from ..errors import InputValidationError
from ..mathutil import log_beta

_LOGGER = get_logger("onlinebayes.multinomial")


class Multinomial:
    """Sparse count table with a Dirichlet-multinomial posterior predictive.

    What:
      Hold per-token sparse vectors of per-outcome counts together with the
      default :class:`MultinomialParameters`.

    Why:
      A Dirichlet prior with a symmetric pseudo count integrates out the
      per-outcome token probabilities, so small counts do not produce
      overconfident predictions.

    How:
      The constructor validates externally supplied state. Internal updates
      pass precomputed per-outcome totals through ``_totals`` and skip the
      per-vector scan, since they preserve the invariants by construction.

    Args:
      parameters: Default parameters, :class:`MultinomialParameters` defaults
        when omitted.
      outcome_index: Outcome to dense handle mapping.
      features: Token to :class:`SparseIntVector` mapping.

    Raises:
      InputValidationError: If handles are not dense or a vector references
        an unknown handle.
    """

    __slots__ = ("_parameters", "_outcome_index", "_features", "_totals", "_outcomes_by_index")

    def __init__(
        self,
        parameters: Optional[MultinomialParameters] = None,
        outcome_index: Optional[Mapping[str, int]] = None,
        features: Optional[Mapping[str, SparseIntVector]] = None,
        *,
        _totals: Optional[np.ndarray] = None,
    ) -> None:
        index = dict(outcome_index or {})
        vectors = dict(features or {})
        by_index: List[Optional[str]] = [None] * len(index)
        for outcome, handle in index.items():
            if not 0 <= handle < len(index) or by_index[handle] is not None:
                raise InputValidationError(f"outcome handles must be dense and unique, got {handle} for '{outcome}'")
            by_index[handle] = outcome
        if _totals is None:
            totals = np.zeros(len(index), dtype=np.int64)
            for token, vector in vectors.items():
                if vector.max_index >= len(index):
                    raise InputValidationError(f"feature '{token}' references an unknown outcome handle")
                np.add.at(totals, vector.indices, vector.values)
            _totals = totals
        _totals.flags.writeable = False
        self._parameters = parameters or MultinomialParameters()
        self._outcome_index = MappingProxyType(index)
        self._features = MappingProxyType(vectors)
        self._totals = _totals
        self._outcomes_by_index: Tuple[str, ...] = tuple(by_index)  # type: ignore[arg-type]

    @property
    def parameters(self) -> MultinomialParameters:
        return self._parameters

    @property
    def outcome_index(self) -> Mapping[str, int]:
        return self._outcome_index

    @property
    def features(self) -> Mapping[str, SparseIntVector]:
        return self._features

    @property
    def outcomes(self) -> Tuple[str, ...]:
        """Outcomes in handle order."""

        return self._outcomes_by_index

    def outcome_totals(self) -> Dict[str, int]:
        """Total token count observed for each outcome."""

        return {outcome: int(self._totals[idx]) for idx, outcome in enumerate(self._outcomes_by_index)}

    def count(self, outcome: str, token: str) -> int:
        """Return how often ``outcome`` observed ``token``."""

        handle = self._outcome_index.get(outcome)
        vector = self._features.get(token)
        if handle is None or vector is None:
            return 0
        return dict(vector).get(handle, 0)

    def with_parameters(self, parameters: MultinomialParameters) -> "Multinomial":
        return Multinomial(parameters, self._outcome_index, self._features, _totals=self._totals)

    def batch_update(
        self,
        updates: Sequence[Tuple[str, Mapping[str, int]]],
        parameters: Optional[MultinomialParameters] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Multinomial":
        """Return a new multinomial with every ``(outcome, counts)`` update added.

        What:
          Accumulate token counts per outcome, admitting never-seen tokens
          stochastically.

        Why:
          Rare tokens dominate vocabulary size on long streams while carrying
          little signal. Admitting a token with probability
          ``1 - (1 - p) ** count`` keeps frequent tokens almost surely and
          drops most one-off tokens.

        How:
          Invert the updates, run the admission gate once per unseen token
          using its total count in the batch, give new outcomes handles in
          first-seen order and merge-add one vector per admitted token.

        Args:
          updates: ``(outcome, token counts)`` pairs.
          parameters: Overrides the default ``include_feature_probability``
            for this batch.
          rng: Random source for the admission gate. A fresh unseeded
            generator is used when omitted and a draw is needed.

        Returns:
          The updated :class:`Multinomial`, keeping this instance's default
          parameters.
        """

        probability = (parameters or self._parameters).include_feature_probability
        inverted = _invert(updates)
        if not inverted:
            return self
        admitted = self._admit(inverted, probability, rng)

        outcome_index = dict(self._outcome_index)
        features = dict(self._features)
        totals: List[int] = self._totals.tolist()
        kept = set(admitted)
        for outcome, counts in updates:
            if outcome in outcome_index:
                continue
            if any(count > 0 and token in kept for token, count in counts.items()):
                outcome_index[outcome] = len(outcome_index)
                totals.append(0)
        for token in admitted:
            cells: Dict[int, int] = {}
            for outcome, count in inverted[token].items():
                handle = outcome_index[outcome]
                cells[handle] = count
                totals[handle] += count
            vector = SparseIntVector.from_mapping(cells)
            previous = features.get(token)
            features[token] = previous.add(vector) if previous is not None else vector
        return Multinomial(
            self._parameters,
            outcome_index,
            features,
            _totals=np.asarray(totals, dtype=np.int64),
        )

    def log_posterior_predictive(
        self,
        outcomes: AbstractSet[str],
        value: Mapping[str, int],
        parameters: Optional[MultinomialParameters] = None,
    ) -> Dict[str, float]:
        """Dirichlet-multinomial log probability of ``value`` for each outcome.

        What:
          Return ``log p(value | outcome, D)`` up to a shared constant, with
          tokens outside the vocabulary ignored.

        Why:
          Unseen tokens carry no information about which outcome produced
          them; keeping them would only shift every score by the same
          pseudo-count term.

        How:
          With ``n`` the filtered token total, ``V`` the vocabulary size and
          ``q`` the pseudo count, every outcome starts at
          ``log(n) + log_beta(alpha0 + V*q, n) - sum_t wrong(t)`` where
          ``wrong(t) = log(c) + log_beta(q, c)`` assumes a zero stored count.
          Each stored non-zero cell ``i`` then replaces ``wrong(t)`` with
          ``log(c) + log_beta(i + q, c)``.

        Args:
          outcomes: Outcomes to score; unseen outcomes behave as if they had
            seen nothing.
          value: Token counts of the query.
          parameters: Overrides the default ``pseudo_count``.

        Returns:
          A mapping with exactly the keys of ``outcomes``. Every value is
          ``0.0`` when the model is empty or no queried token is known.
        """

        pseudo_count = (parameters or self._parameters).pseudo_count
        filtered = {token: int(count) for token, count in value.items() if count > 0 and token in self._features}
        n = sum(filtered.values())
        if n == 0 or not self._features:
            return {outcome: 0.0 for outcome in outcomes}

        wrong = {token: math.log(count) + log_beta(pseudo_count, count) for token, count in filtered.items()}
        wrong_sum = sum(wrong.values())
        log_n = math.log(n)
        vocabulary_mass = len(self._features) * pseudo_count

        result: Dict[str, float] = {}
        for outcome in outcomes:
            handle = self._outcome_index.get(outcome)
            alpha0 = int(self._totals[handle]) if handle is not None else 0
            result[outcome] = log_n + log_beta(alpha0 + vocabulary_mass, n) - wrong_sum

        for token, count in filtered.items():
            log_count = math.log(count)
            baseline = wrong[token]
            for handle, stored in self._features[token]:
                outcome = self._outcomes_by_index[handle]
                if outcome in result:
                    result[outcome] += baseline - (log_count + log_beta(stored + pseudo_count, count))
        return result

    def _admit(
        self,
        inverted: Mapping[str, Mapping[str, int]],
        probability: float,
        rng: Optional[np.random.Generator],
    ) -> List[str]:
        """Return the tokens of ``inverted`` kept by the admission gate, in order."""

        admitted: List[str] = []
        offered = 0
        for token, per_outcome in inverted.items():
            if token in self._features or probability >= 1.0:
                admitted.append(token)
                continue
            if rng is None:
                rng = np.random.default_rng()
            offered += 1
            occurrences = sum(per_outcome.values())
            if rng.random() < 1.0 - (1.0 - probability) ** occurrences:
                admitted.append(token)
        if offered:
            _LOGGER.debug(
                "vocabulary_sampled",
                offered=offered,
                admitted=len(admitted) - (len(inverted) - offered),
                probability=probability,
            )
        return admitted

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Multinomial):
            return NotImplemented
        return (
            self._parameters == other._parameters
            and dict(self._outcome_index) == dict(other._outcome_index)
            and dict(self._features) == dict(other._features)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Multinomial(parameters={self._parameters!r}, outcomes={len(self._outcome_index)}, "
            f"vocabulary={len(self._features)})"
        )


def _invert(updates: Sequence[Tuple[str, Mapping[str, int]]]) -> Dict[str, Dict[str, int]]:
    """Turn ``(outcome, token counts)`` pairs into ``token -> outcome -> count``."""

    inverted: Dict[str, Dict[str, int]] = {}
    for outcome, counts in updates:
        for token, count in counts.items():
            if count <= 0:
                continue
            per_outcome = inverted.setdefault(token, {})
            per_outcome[outcome] = per_outcome.get(outcome, 0) + int(count)
    return inverted


__all__ = ["Multinomial"]
