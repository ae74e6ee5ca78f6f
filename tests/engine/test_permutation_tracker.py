from __future__ import annotations

import random

import numpy as np
import pytest

from keysort.engine.permutation import PermutationTracker


def test_starts_as_identity():
    p = PermutationTracker(5)
    assert len(p) == 5
    assert [p.original(i) for i in range(5)] == [0, 1, 2, 3, 4]
    assert p.is_bijection()


def test_empty_tracker_is_a_bijection():
    p = PermutationTracker(0)
    assert len(p) == 0
    assert p.is_bijection()
    assert p.as_array().shape == (0,)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        PermutationTracker(-1)


def test_swap_exchanges_identities():
    p = PermutationTracker(3)
    p.swap(0, 2)
    assert [p.original(i) for i in range(3)] == [2, 1, 0]
    p.swap(0, 0)
    assert p.original(0) == 2


@pytest.mark.parametrize("n", [1, 2, 7, 64])
def test_random_swaps_keep_bijection(n):
    rng = random.Random(n)
    p = PermutationTracker(n)
    mirror = list(range(n))
    for _ in range(500):
        i, j = rng.randrange(n), rng.randrange(n)
        p.swap(i, j)
        mirror[i], mirror[j] = mirror[j], mirror[i]
        assert p.is_bijection()
    assert p.as_array().tolist() == mirror


def test_as_array_is_a_readonly_copy():
    p = PermutationTracker(3)
    arr = p.as_array()
    assert arr.dtype == np.int64
    with pytest.raises(ValueError):
        arr[0] = 9
    p.swap(0, 1)
    assert arr.tolist() == [0, 1, 2]
