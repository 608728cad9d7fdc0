"""onlinebayes.core.features.text

What:
  Provide the free-text feature (reviews, comments, message bodies) and the
  word counter it uses to turn a string into token counts.

Why:
  Text is the widest input the classifier sees. A fixed, predictable
  tokeniser keeps training and prediction consistent and lets persisted
  models be reused across processes.

How:
  - Runs of characters that are neither letters nor digits, in any script,
    become a single space; the string is trimmed, lowercased and split.
  - Empty tokens and stopwords are dropped and the rest counted into a
    :class:`Counter`.
  - Counting is delegated to a :class:`Multinomial`.

Interfaces:
  :class:`Text`, :func:`count_words`, :data:`ENGLISH_STOP_WORDS`.

Invariants & Safety:
  - The tokeniser is a pure function of the input and the stopword set.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, FrozenSet, Iterable, Optional, Sequence, Tuple

import numpy as np

from ...collection import Counter
from ...config.schema import MultinomialParameters
from .multinomial import Multinomial

_NON_WORD_RE = re.compile(r"[\W_]+")

ENGLISH_STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "am", "an", "and", "any",
        "are", "as", "at", "be", "because", "been", "before", "being", "below", "between", "both",
        "but", "by", "can", "could", "did", "do", "does", "doing", "down", "during", "each", "either",
        "else", "ever", "every", "few", "for", "from", "further", "had", "has", "have", "having", "he",
        "her", "here", "hers", "herself", "him", "himself", "his", "how", "however", "i", "if", "in",
        "into", "is", "it", "its", "itself", "just", "let", "may", "me", "might", "more", "most",
        "must", "my", "myself", "neither", "nor", "of", "off", "on", "once", "only", "or", "other",
        "ought", "our", "ours", "ourselves", "out", "over", "own", "same", "shall", "she", "should",
        "since", "so", "some", "such", "than", "that", "the", "their", "theirs", "them",
        "themselves", "then", "there", "these", "they", "this", "those", "through", "thus", "to",
        "too", "under", "until", "up", "upon", "us", "very", "was", "we", "were", "what", "when",
        "where", "whether", "which", "while", "who", "whom", "whose", "why", "will", "with",
        "within", "without", "would", "yet", "you", "your", "yours", "yourself", "yourselves",
    }
)


def count_words(text: str, stopwords: AbstractSet[str] = ENGLISH_STOP_WORDS) -> Counter:
    """Tokenise ``text`` and count the remaining words.

    >>> dict(count_words("The cat, the CAT!"))
    {'cat': 2}
    """

    normalised = _NON_WORD_RE.sub(" ", text).strip().lower()
    return Counter.from_iterable(word for word in normalised.split(" ") if word and word not in stopwords)


@dataclass(frozen=True)
class Text:
    """Free-text feature backed by a :class:`Multinomial` over words.

    Attributes:
      delegate: The wrapped multinomial holding all counts.
      stopwords: Words dropped by the tokeniser. Not persisted; a reloaded
        feature uses :data:`ENGLISH_STOP_WORDS` unless told otherwise.
    """

    delegate: Multinomial = field(default_factory=Multinomial)
    stopwords: FrozenSet[str] = field(default=ENGLISH_STOP_WORDS, compare=False)

    @classmethod
    def from_parameters(
        cls,
        parameters: MultinomialParameters,
        stopwords: Iterable[str] = ENGLISH_STOP_WORDS,
    ) -> "Text":
        return cls(Multinomial(parameters), frozenset(stopwords))

    @property
    def parameters(self) -> MultinomialParameters:
        return self.delegate.parameters

    def tokenize(self, text: str) -> Counter:
        return count_words(text, self.stopwords)

    def log_posterior_predictive(
        self,
        outcomes: AbstractSet[str],
        value: str,
        parameters: Optional[MultinomialParameters] = None,
    ) -> Dict[str, float]:
        return self.delegate.log_posterior_predictive(outcomes, self.tokenize(value), parameters)

    def batch_update(
        self,
        updates: Sequence[Tuple[str, str]],
        parameters: Optional[MultinomialParameters] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Text":
        words = [(outcome, self.tokenize(value)) for outcome, value in updates]
        return Text(self.delegate.batch_update(words, parameters, rng), self.stopwords)

    def with_parameters(self, parameters: MultinomialParameters) -> "Text":
        return Text(self.delegate.with_parameters(parameters), self.stopwords)
