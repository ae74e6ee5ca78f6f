"""Position → original-identity bookkeeping for in-place sorts.

PermutationTracker:
  • Starts as the identity permutation (map[i] = i) for i in [0, n).
  • swap(i, j) exchanges map[i] and map[j]; it is always a bijection on [0, n).
  • original(position) returns the identity of the element now at `position`.
  • Only swaps routed through the tracker are reflected; swaps applied to the
    wrapped collection directly are invisible here.
  • Not safe for concurrent swap() calls on one instance.
"""
from __future__ import annotations

import numpy as np

__all__ = ["PermutationTracker"]


class PermutationTracker:
    def __init__(self, n: int) -> None:
        n = int(n)
        if n < 0:
            raise ValueError(f"size must be >= 0, got {n}")
        self._map: np.ndarray = np.arange(n, dtype=np.int64)

    def __len__(self) -> int:
        return int(self._map.shape[0])

    def swap(self, i: int, j: int) -> None:
        m = self._map
        m[i], m[j] = m[j], m[i]

    def original(self, position: int) -> int:
        """Original identity of the element currently at `position`."""
        return int(self._map[position])

    def as_array(self) -> np.ndarray:
        """Read-only copy of the map; index = position, value = identity."""
        out = self._map.copy()
        out.setflags(write=False)
        return out

    def is_bijection(self) -> bool:
        n = len(self)
        if n == 0:
            return True
        seen = np.bincount(self._map, minlength=n)
        return bool(seen.shape[0] == n and np.all(seen == 1))
