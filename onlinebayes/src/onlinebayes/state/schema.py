"""Pydantic layout of a persisted model.

Field names are snake_case in Python and camelCase on the wire. Validation
here only covers shape; invariants that span fields (dense outcome handles,
ascending indices) are checked when the codec rebuilds the model.
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _StateModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class SparseIntVectorState(_StateModel):
    indices: List[int] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _same_length(self) -> "SparseIntVectorState":
        if len(self.indices) != len(self.values):
            raise ValueError("indices and values must have the same length")
        return self


class MultinomialState(_StateModel):
    include_feature_probability: float
    pseudo_count: float
    outcome_index: Dict[str, int] = Field(default_factory=dict)
    features: Dict[str, SparseIntVectorState] = Field(default_factory=dict)


class StreamingEstimatorState(_StateModel):
    count: int
    mean: float
    m2: float


class GaussianState(_StateModel):
    mu0: float = 0.0
    nu: float = 0.0
    beta: float = 0.0
    alpha: float = 0.0
    estimators: Dict[str, StreamingEstimatorState] = Field(default_factory=dict)


class ModelState(_StateModel):
    """Root document; ``model_version`` must match the codec's version."""

    model_version: int
    prior_counts: Dict[str, int] = Field(default_factory=dict)
    prior_pseudo_count: int = Field(default=0, ge=0)
    text_features: Dict[str, MultinomialState] = Field(default_factory=dict)
    categorical_features: Dict[str, MultinomialState] = Field(default_factory=dict)
    gaussian_features: Dict[str, GaussianState] = Field(default_factory=dict)


__all__ = [
    "SparseIntVectorState",
    "MultinomialState",
    "StreamingEstimatorState",
    "GaussianState",
    "ModelState",
]
