"""
Module: tests/unit/test_sparse_vector.py

What:
    Exercise ``SparseIntVector``: construction, the merge-add used by batch
    updates and the invariant checks applied when state is reloaded.

Why:
    Each admitted token is stored as one sparse vector indexed by outcome
    handle. A broken merge would corrupt counts for every later prediction,
    and an unchecked reload would let handles point past the outcome table.

How:
    Compare vectors through their ``(index, value)`` iteration and assert that
    malformed arrays raise ``InputValidationError``.

Interfaces:
    test_from_mapping_sorts_and_drops_zeros, test_add_merges_shared_and_new_indices,
    test_add_with_empty_returns_other, test_arrays_are_read_only,
    test_from_arrays_rejects_invalid_layouts, test_to_lists_round_trips_layout
"""

import numpy as np
import pytest

from onlinebayes.collection import SparseIntVector
from onlinebayes.core.errors import InputValidationError


def test_from_mapping_sorts_and_drops_zeros():
    vector = SparseIntVector.from_mapping({4: 2, 1: 5, 3: 0})

    assert list(vector) == [(1, 5), (4, 2)]
    assert len(vector) == 2
    assert vector.max_index == 4


def test_add_merges_shared_and_new_indices():
    """
    What:
        Adding two vectors sums shared indices and interleaves the rest.

    Why:
        Batch updates merge one fresh vector per token into the stored one;
        ordering must stay strictly ascending afterwards.

    How:
        Merge vectors that overlap on index 2 and differ elsewhere, including
        an index below and one above the existing range.
    """
    left = SparseIntVector.from_mapping({2: 1, 5: 3})
    right = SparseIntVector.from_mapping({0: 4, 2: 2, 7: 1})

    merged = left.add(right)

    assert list(merged) == [(0, 4), (2, 3), (5, 3), (7, 1)]
    assert merged == right.add(left)


def test_add_with_empty_returns_other():
    vector = SparseIntVector.from_mapping({1: 1})

    assert SparseIntVector.empty().add(vector) == vector
    assert vector.add(SparseIntVector.empty()) == vector
    assert SparseIntVector.empty().max_index == -1


def test_arrays_are_read_only():
    vector = SparseIntVector.from_mapping({0: 1})

    with pytest.raises(ValueError):
        vector.values[0] = 3
    assert vector.indices.dtype == np.int64


@pytest.mark.parametrize(
    "indices, values",
    [
        ([0, 1], [1]),
        ([2, 1], [1, 1]),
        ([1, 1], [1, 1]),
        ([-1, 2], [1, 1]),
        ([0, 3], [1, 0]),
    ],
)
def test_from_arrays_rejects_invalid_layouts(indices, values):
    with pytest.raises(InputValidationError):
        SparseIntVector.from_arrays(indices, values)


def test_to_lists_round_trips_layout():
    vector = SparseIntVector.from_arrays([0, 3, 9], [2, 1, 4])

    indices, values = vector.to_lists()

    assert indices == [0, 3, 9]
    assert values == [2, 1, 4]
    assert SparseIntVector.from_arrays(indices, values) == vector
