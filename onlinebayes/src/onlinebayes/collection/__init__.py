"""Persistent collection primitives shared by the features.

What:
  Re-export :class:`Counter` and :class:`SparseIntVector`.

Why:
  Feature modules and tests import both types; a package facade keeps those
  imports independent of the module layout.
"""

from .counter import Counter
from .sparse import SparseIntVector

__all__ = [
    "Counter",
    "SparseIntVector",
]
