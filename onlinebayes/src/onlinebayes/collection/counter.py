"""Immutable multiset used to feed token and category counts into features."""
from __future__ import annotations

import collections
from collections.abc import Mapping
from typing import Dict, Hashable, Iterable, Iterator, TypeVar

K = TypeVar("K", bound=Hashable)


class Counter(Mapping):
    """Read-only mapping from key to occurrence count.

    What:
      Count the unique values of an iterable and expose the result as an
      immutable mapping where absent keys read as ``0``.

    Why:
      Features exchange bags of tokens; sharing a mutable
      :class:`collections.Counter` between a caller and a persistent model
      value would let one silently change the other.

    How:
      Counts are computed once with :class:`collections.Counter`, zero and
      negative entries are discarded, and the result is stored in a private
      dict. ``__getitem__`` falls back to ``0`` while ``__contains__`` and
      iteration only see stored keys.
    """

    __slots__ = ("_counts", "_total")

    def __init__(self, counts: Mapping[K, int] | None = None) -> None:
        stored: Dict[K, int] = {}
        for key, count in (counts or {}).items():
            count = int(count)
            if count > 0:
                stored[key] = count
        self._counts = stored
        self._total = sum(stored.values())

    @classmethod
    def of(cls, *entries: K) -> "Counter":
        """Count the positional ``entries``."""

        return cls.from_iterable(entries)

    @classmethod
    def from_iterable(cls, entries: Iterable[K]) -> "Counter":
        """Count every element produced by ``entries``."""

        return cls(collections.Counter(entries))

    def __getitem__(self, key: K) -> int:
        return self._counts.get(key, 0)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __iter__(self) -> Iterator[K]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Counter):
            return self._counts == other._counts
        if isinstance(other, Mapping):
            return self._counts == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._counts.items()))

    def __repr__(self) -> str:
        return f"Counter({self._counts!r})"

    @property
    def total(self) -> int:
        """Sum of all counts."""

        return self._total
