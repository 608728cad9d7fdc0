"""onlinebayes.collection.sparse

What:
  Provide :class:`SparseIntVector`, the per-token count vector stored by the
  multinomial feature, indexed by dense outcome handles.

Why:
  Text and categorical features can hold hundreds of thousands of tokens,
  each observed by only a handful of outcomes. Keeping two compact integer
  arrays per token is far cheaper than a dict of dicts and makes the
  merge-add used by incremental updates linear in the vector sizes.

How:
  - ``indices`` and ``values`` are read-only ``numpy.int64`` arrays of equal
    length; indices strictly ascend and values are never zero.
  - :meth:`SparseIntVector.add` locates the other vector's indices with
    :func:`numpy.searchsorted`, sums the shared cells, and inserts the new
    ones in a single pass.

Interfaces:
  :class:`SparseIntVector`.

Invariants & Safety:
  - Instances are immutable; every operation returns a new vector.
  - :meth:`SparseIntVector.from_arrays` rejects arrays violating the layout
    so persisted state is validated while it is rebuilt.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Mapping, Tuple

import numpy as np

from ..core.errors import InputValidationError


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class SparseIntVector:
    """Sorted sparse vector of integer counts."""

    __slots__ = ("_indices", "_values")

    def __init__(self, indices: np.ndarray, values: np.ndarray) -> None:
        # Callers outside this module go through from_mapping/from_arrays.
        self._indices = _frozen(indices)
        self._values = _frozen(values)

    @classmethod
    def empty(cls) -> "SparseIntVector":
        return cls(np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64))

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, int]) -> "SparseIntVector":
        """Build a vector from an ``index -> value`` mapping, dropping zeros."""

        items = sorted((int(idx), int(value)) for idx, value in mapping.items() if value != 0)
        if not items:
            return cls.empty()
        indices = np.fromiter((idx for idx, _ in items), dtype=np.int64, count=len(items))
        values = np.fromiter((value for _, value in items), dtype=np.int64, count=len(items))
        if indices[0] < 0:
            raise InputValidationError("sparse vector indices must be non-negative")
        return cls(indices, values)

    @classmethod
    def from_arrays(cls, indices: Iterable[int], values: Iterable[int]) -> "SparseIntVector":
        """Rebuild a vector from stored arrays, checking the layout invariants.

        Raises:
          InputValidationError: If the arrays differ in length, indices are
            negative or not strictly ascending, or a value is zero.
        """

        idx = np.asarray(list(indices), dtype=np.int64)
        val = np.asarray(list(values), dtype=np.int64)
        if idx.ndim != 1 or val.ndim != 1 or idx.shape != val.shape:
            raise InputValidationError("sparse vector arrays must be one-dimensional and of equal length")
        if idx.size:
            if idx[0] < 0:
                raise InputValidationError("sparse vector indices must be non-negative")
            if np.any(np.diff(idx) <= 0):
                raise InputValidationError("sparse vector indices must be strictly ascending")
            if np.any(val == 0):
                raise InputValidationError("sparse vector values must be non-zero")
        return cls(idx, val)

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def max_index(self) -> int:
        """Largest stored index, ``-1`` for an empty vector."""

        return int(self._indices[-1]) if self._indices.size else -1

    def add(self, other: "SparseIntVector") -> "SparseIntVector":
        """Return the element-wise sum of ``self`` and ``other``."""

        if not other._indices.size:
            return self
        if not self._indices.size:
            return other
        positions = np.searchsorted(self._indices, other._indices)
        clipped = np.minimum(positions, self._indices.size - 1)
        shared = self._indices[clipped] == other._indices
        values = self._values.copy()
        values[clipped[shared]] += other._values[shared]
        fresh = ~shared
        indices = np.insert(self._indices, positions[fresh], other._indices[fresh])
        values = np.insert(values, positions[fresh], other._values[fresh])
        keep = values != 0
        if not keep.all():
            indices, values = indices[keep], values[keep]
        return SparseIntVector(indices, values)

    def to_lists(self) -> Tuple[List[int], List[int]]:
        """Return ``(indices, values)`` as plain lists of ints."""

        return self._indices.tolist(), self._values.tolist()

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return zip(self._indices.tolist(), self._values.tolist())

    def __len__(self) -> int:
        return int(self._indices.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseIntVector):
            return NotImplemented
        return np.array_equal(self._indices, other._indices) and np.array_equal(self._values, other._values)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SparseIntVector({dict(self)!r})"
