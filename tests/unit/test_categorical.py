"""
Module: tests/unit/test_categorical.py

What:
    Check that ``Categorical`` turns one category into a single-token count
    and delegates everything else to its multinomial.

Interfaces:
    test_scores_match_single_token_multinomial, test_parameters_pass_through,
    test_batch_update_counts_categories, test_with_parameters_sets_defaults
"""

import pytest

from onlinebayes.collection import Counter
from onlinebayes.config.schema import MultinomialParameters
from onlinebayes.core.features import Categorical, Multinomial


def _multinomial():
    return Multinomial(MultinomialParameters(pseudo_count=1.0)).batch_update(
        [("p", Counter.of("ole")), ("n", Counter.of("ole", "bob", "ada"))]
    )


def test_scores_match_single_token_multinomial():
    multinomial = _multinomial()

    actual = Categorical(multinomial).log_posterior_predictive({"p", "n"}, "ole")

    assert actual == multinomial.log_posterior_predictive({"p", "n"}, Counter.of("ole"))


def test_parameters_pass_through():
    """
    What:
        Explicit parameters reach the multinomial unchanged and ``None`` keeps
        the defaults.
    """
    multinomial = _multinomial()
    override = MultinomialParameters(include_feature_probability=0.32, pseudo_count=0.23)
    categorical = Categorical(multinomial)

    assert categorical.log_posterior_predictive({"p", "n"}, "bob", override) == (
        multinomial.log_posterior_predictive({"p", "n"}, Counter.of("bob"), override)
    )
    assert categorical.log_posterior_predictive({"p", "n"}, "bob", None) == (
        multinomial.log_posterior_predictive({"p", "n"}, Counter.of("bob"))
    )


def test_batch_update_counts_categories():
    categorical = Categorical.from_parameters(MultinomialParameters(pseudo_count=1.0)).batch_update(
        [("usd", "alice"), ("eur", "alice"), ("usd", "bob")]
    )

    assert categorical.delegate.count("usd", "alice") == 1
    assert categorical.delegate.count("usd", "bob") == 1
    assert categorical.delegate.count("eur", "bob") == 0
    assert categorical.parameters.pseudo_count == pytest.approx(1.0)


def test_with_parameters_sets_defaults():
    parameters = MultinomialParameters(include_feature_probability=0.0892275415, pseudo_count=0.7363151583)

    categorical = Categorical().with_parameters(parameters)

    assert categorical.parameters == parameters
    assert categorical.delegate.parameters == parameters
