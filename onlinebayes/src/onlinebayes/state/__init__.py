"""Persisted model state: pydantic layout and the model codec."""

from .codec import MODEL_VERSION, StateLoadError, StateVersionError, dumps, from_state, loads, to_state
from .schema import GaussianState, ModelState, MultinomialState, SparseIntVectorState, StreamingEstimatorState

__all__ = [
    "MODEL_VERSION",
    "StateLoadError",
    "StateVersionError",
    "dumps",
    "loads",
    "to_state",
    "from_state",
    "ModelState",
    "MultinomialState",
    "SparseIntVectorState",
    "GaussianState",
    "StreamingEstimatorState",
]
