"""
Module: tests/e2e/test_end_to_end.py

What:
    Exercise the full flow: configuration -> empty model -> streamed batch
    updates with seeded admission -> persisted state -> reloaded model ->
    predictions.

Why:
    Unit tests pin each formula; this suite checks that the pieces compose
    the way an embedding service uses them, including reproducibility under
    a fixed seed and classification quality on separable synthetic data.

How:
    Generate deterministic synthetic data (an iris-like gaussian problem and a
    sentiment-like text problem), train in several batches and assert on
    accuracy and on identical predictions after a reload.

Interfaces:
    test_configured_model_round_trip, test_seeded_training_is_reproducible,
    test_gaussian_classes_are_separated, test_text_classification_accuracy
"""

import numpy as np
import pytest

from onlinebayes.config import build_model, load_runtime_config, make_rng, parse_runtime_config
from onlinebayes.core.model import Inputs, Update
from onlinebayes.state import dumps, loads

POSITIVE = ["great", "wonderful", "loved", "brilliant", "fun", "moving"]
NEGATIVE = ["boring", "awful", "hated", "dull", "slow", "waste"]
NEUTRAL = ["film", "plot", "actors", "cinema", "story", "ending"]


def _review(rng, vocabulary):
    words = list(rng.choice(vocabulary, size=3)) + list(rng.choice(NEUTRAL, size=3))
    return " ".join(words)


def _reviews(rng, count):
    updates = []
    for _ in range(count):
        if rng.random() < 0.5:
            updates.append(Update(Inputs(text={"review": _review(rng, POSITIVE)}), "positive"))
        else:
            updates.append(Update(Inputs(text={"review": _review(rng, NEGATIVE)}), "negative"))
    return updates


def _batches(updates, size):
    return [updates[i : i + size] for i in range(0, len(updates), size)]


def test_configured_model_round_trip():
    """
    What:
        Train a model built from the canned configuration, persist it and
        reload it.

    Why:
        Persisted state must carry configured parameters and every count so a
        serving process predicts exactly like the training process.
    """
    config = load_runtime_config()
    model = build_model(config)
    rng = make_rng(config)
    data = np.random.default_rng(0)
    updates = _reviews(data, 60)
    for index, update in enumerate(updates):
        updates[index] = Update(
            Inputs(
                text=update.inputs.text,
                categorical={"user": f"user-{index % 4}"},
                gaussian={"age": float(data.normal(30 if update.outcome == "positive" else 50, 5))},
            ),
            update.outcome,
        )
    for batch in _batches(updates, 16):
        model = model.batch_add(batch, rng=rng)

    restored = loads(dumps(model))
    query = Inputs(text={"review": "brilliant story"}, categorical={"user": "user-1"}, gaussian={"age": 33.0})

    assert restored == model
    assert restored.prior_pseudo_count == config.parameters.prior_pseudo_count
    assert restored.text_features["review"].parameters.pseudo_count == 0.5
    assert restored.predict(query) == model.predict(query)
    assert restored.predict(query)["positive"] > 0.9


def test_seeded_training_is_reproducible():
    config = parse_runtime_config(
        "random_seed: 5\nparameters:\n  text:\n    review:\n      include_feature_probability: 0.3\n"
    )
    updates = _reviews(np.random.default_rng(1), 40)

    def train():
        model = build_model(config)
        rng = make_rng(config)
        for batch in _batches(updates, 10):
            model = model.batch_add(batch, rng=rng)
        return model

    first, second = train(), train()

    assert first == second
    vocabulary = set(first.text_features["review"].delegate.features)
    assert vocabulary
    assert vocabulary <= set(POSITIVE + NEGATIVE + NEUTRAL)


def test_gaussian_classes_are_separated():
    rng = np.random.default_rng(42)
    centres = {
        "setosa": (5.0, 3.4, 1.5),
        "versicolor": (5.9, 2.8, 4.3),
        "virginica": (6.6, 3.0, 5.6),
    }
    names = ("sepal_length", "sepal_width", "petal_length")

    def sample(label):
        values = rng.normal(centres[label], 0.25)
        return Inputs(gaussian={name: float(v) for name, v in zip(names, values)})

    train = [Update(sample(label), label) for _ in range(40) for label in centres]
    model = build_model(parse_runtime_config(""))
    for batch in _batches(train, 25):
        model = model.batch_add(batch)

    tests = [(sample(label), label) for _ in range(20) for label in centres]
    correct = 0
    for inputs, label in tests:
        prediction = model.predict(inputs)
        assert sum(prediction.values()) == pytest.approx(1.0)
        correct += max(prediction, key=prediction.get) == label

    assert correct / len(tests) > 0.9


def test_text_classification_accuracy():
    data = np.random.default_rng(7)
    model = build_model(parse_runtime_config("random_seed: 3\n"))
    for batch in _batches(_reviews(data, 200), 50):
        model = model.batch_add(batch)

    tests = _reviews(data, 100)
    correct = sum(
        max(prediction, key=prediction.get) == update.outcome
        for update in tests
        for prediction in [model.predict(update.inputs)]
    )

    assert correct / len(tests) > 0.9
    assert set(model.outcomes) == {"positive", "negative"}
