"""
Module: tests/unit/test_gaussian.py

What:
    Validate the Normal-Inverse-Gamma gaussian feature: its Student-t
    posterior predictive, the fallback for under-determined outcomes, scale
    and shift invariance, and rejection of non-finite numbers.

Why:
    Numeric inputs can easily dominate a naive Bayes product. The fallback
    rules keep a brand-new or constant outcome from overruling outcomes with
    a properly estimated distribution.

How:
    Train small features and compare against densities computed with
    ``scipy.stats.t.pdf`` and against the maximum-likelihood normal density
    for large samples.

Interfaces:
    test_outcome_with_less_than_two_samples_gets_least_likely_score,
    test_zero_variance_outcome_gets_least_likely_score,
    test_no_defined_outcomes_scores_zero, test_invariant_to_scaling_and_shifting,
    test_posterior_predictive_is_t_distribution,
    test_posterior_predictive_with_prior_parameters,
    test_approaches_mle_gaussian_with_enough_samples,
    test_non_finite_values_are_rejected
"""

import math

import pytest

from onlinebayes.config.schema import GaussianParameters
from onlinebayes.core.errors import InputValidationError
from onlinebayes.core.features import Gaussian


def test_outcome_with_less_than_two_samples_gets_least_likely_score():
    gaussian = Gaussian().batch_update(
        [("a", 25.0), ("a", 30.0), ("a", 35.0), ("b", 10.0), ("b", 15.0), ("b", 20.0), ("c", 90.0)]
    )

    scores = gaussian.log_posterior_predictive({"a", "b", "c", "d"}, 20.0)

    assert scores["b"] > scores["a"]
    assert scores["c"] == pytest.approx(scores["a"], abs=1e-6)
    assert scores["d"] == pytest.approx(scores["a"], abs=1e-6)


def test_zero_variance_outcome_gets_least_likely_score():
    gaussian = Gaussian().batch_update(
        [("a", 25.0), ("a", 30.0), ("a", 35.0), ("b", 10.0), ("b", 15.0), ("b", 20.0)]
        + [("c", 90.0)] * 3
    )

    scores = gaussian.log_posterior_predictive({"a", "b", "c"}, 20.0)

    assert scores["b"] > scores["a"]
    assert scores["c"] == pytest.approx(scores["a"], abs=1e-6)


def test_no_defined_outcomes_scores_zero():
    gaussian = Gaussian().batch_update([("a", 25.0), ("b", 20.0), ("b", 20.0)])

    assert gaussian.log_posterior_predictive({"a", "b", "c"}, 20.0) == {"a": 0.0, "b": 0.0, "c": 0.0}
    assert Gaussian().log_posterior_predictive({"a"}, 1.0) == {"a": 0.0}


@pytest.mark.parametrize("scale", [1.0, 0.1, 10.0, -1.0])
@pytest.mark.parametrize("shift", [0.0, -10.0, 20.0])
def test_invariant_to_scaling_and_shifting(scale, shift):
    """
    What:
        The log-odds between two outcomes does not change when every number
        is scaled and shifted by the same amounts.

    Why:
        With all-zero hyper-parameters the result must not depend on the unit
        of measurement (Celsius vs Fahrenheit, cents vs euros).
    """
    gaussian = Gaussian().batch_update(
        [
            ("t-shirt", scale * 10.0 + shift),
            ("t-shirt", scale * 19.0 + shift),
            ("sweater", scale * -10.0 + shift),
            ("sweater", scale * -20.0 + shift),
        ]
    )

    scores = gaussian.log_posterior_predictive({"t-shirt", "sweater"}, scale * 8.0 + shift)

    assert scores["t-shirt"] - scores["sweater"] == pytest.approx(2.4425467832421157, abs=1e-6)


def test_posterior_predictive_is_t_distribution():
    gaussian = Gaussian().batch_update([("p", 20.0), ("p", 30.0), ("p", 40.0)])

    actual = math.exp(gaussian.log_posterior_predictive({"p"}, 23.0)["p"])

    assert actual == pytest.approx(0.02782119452355812, abs=1e-6)


def test_posterior_predictive_with_prior_parameters():
    gaussian = Gaussian().batch_update([("p", 20.0), ("p", 30.0), ("p", 40.0)])
    prior = GaussianParameters(mu0=28.0, nu=2, beta=120.0, alpha=1)

    explicit = math.exp(gaussian.log_posterior_predictive({"p"}, 23.0, prior)["p"])
    defaulted = math.exp(gaussian.with_parameters(prior).log_posterior_predictive({"p"}, 23.0)["p"])

    assert explicit == pytest.approx(0.029822246851240995, abs=1e-6)
    assert defaulted == pytest.approx(explicit)


def test_approaches_mle_gaussian_with_enough_samples():
    numbers = [2.0, 6.0] * 1000
    gaussian = Gaussian().batch_update([("p", x) for x in numbers])
    mean = sum(numbers) / len(numbers)
    variance = sum((x - mean) ** 2 for x in numbers) / (len(numbers) - 1)
    std = math.sqrt(variance)

    for i in range(-200, 201, 5):
        x = mean + i / 100.0 * std
        expected = math.log(1.0 / math.sqrt(2 * math.pi * variance) * math.exp(-((x - mean) ** 2) / (2 * variance)))
        assert gaussian.log_posterior_predictive({"p"}, x)["p"] == pytest.approx(expected, abs=1e-3)


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_values_are_rejected(bad):
    gaussian = Gaussian().batch_update([("p", 1.0), ("p", 2.0)])

    with pytest.raises(InputValidationError):
        gaussian.batch_update([("p", 3.0), ("p", bad)])
    with pytest.raises(InputValidationError):
        gaussian.log_posterior_predictive({"p"}, bad)
    assert gaussian.estimators["p"].count == 2


def test_parameters_are_not_used_when_updating():
    prior = GaussianParameters(mu0=5.0, nu=1.0)

    gaussian = Gaussian().batch_update([("p", 1.0)], prior)

    assert gaussian.parameters == GaussianParameters()
    assert gaussian.estimators["p"].mean == 1.0
