"""Feature variants of the naive Bayes model.

What:
  Expose the three feature kinds (text, categorical, gaussian), the
  multinomial engine shared by the first two, and the feature contract.

Why:
  The model dispatches on a closed set of variants; gathering them here keeps
  that set visible in one place.

Interfaces:
  ``Feature``, ``AnyFeature``, ``Multinomial``, ``Categorical``, ``Text``,
  ``count_words``, ``ENGLISH_STOP_WORDS``, ``Gaussian``,
  ``StreamingEstimator``.
"""

from .base import AnyFeature, Feature
from .categorical import Categorical
from .gaussian import Gaussian, StreamingEstimator
from .multinomial import Multinomial
from .text import ENGLISH_STOP_WORDS, Text, count_words

__all__ = [
    "AnyFeature",
    "Feature",
    "Multinomial",
    "Categorical",
    "Text",
    "count_words",
    "ENGLISH_STOP_WORDS",
    "Gaussian",
    "StreamingEstimator",
]
