"""Pydantic models describing feature parameters and the runtime configuration."""
from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ValidationError(ValueError):
    """Raised when configuration data does not satisfy the schema."""


class MultinomialParameters(BaseModel):
    """Parameters of a text or categorical feature.

    Attributes:
      include_feature_probability: Probability of admitting a never-seen token
        per occurrence within a batch. ``1.0`` admits everything.
      pseudo_count: Added to every count, including zero counts.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    include_feature_probability: float = Field(default=1.0, gt=0.0, le=1.0)
    pseudo_count: float = Field(default=0.1, gt=0.0)


class GaussianParameters(BaseModel):
    """Normal-Inverse-Gamma prior hyper-parameters of a gaussian feature.

    Attributes:
      mu0: Prior mean.
      nu: Number of observations the prior mean was estimated from.
      beta: Half the prior sum of squared deviations.
      alpha: Prior variance was estimated from ``2 * alpha`` observations.

    Only used when predicting. Leaving them at zero keeps the feature scale
    and shift invariant.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mu0: float = 0.0
    nu: float = Field(default=0.0, ge=0.0)
    beta: float = Field(default=0.0, ge=0.0)
    alpha: float = Field(default=0.0, ge=0.0)

    @field_validator("mu0", "nu", "beta", "alpha")
    @classmethod
    def _finite(cls, value: float) -> float:
        if value != value or value in (float("inf"), float("-inf")):
            raise ValidationError("gaussian hyper-parameters must be finite")
        return value


class ModelParameters(BaseModel):
    """Per-feature default parameters plus the prior pseudo count of a model."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    prior_pseudo_count: int = Field(default=0, ge=0)
    text: Dict[str, MultinomialParameters] = Field(default_factory=dict)
    categorical: Dict[str, MultinomialParameters] = Field(default_factory=dict)
    gaussian: Dict[str, GaussianParameters] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Threshold for the structured logger."""

    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = "WARN"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.upper()
            if value == "WARNING":
                return "WARN"
        return value


class RuntimeConfig(BaseModel):
    """Root configuration loaded from ``onlinebayes.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    random_seed: Optional[int] = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    parameters: ModelParameters = Field(default_factory=ModelParameters)

    @field_validator("version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value != 1:
            raise ValidationError("configuration version must be 1")
        return value
