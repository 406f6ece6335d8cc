"""
Unit tests for addmul.outer
"""

import threading, time
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from addmul.outer import ScalarCache, outer_product, matrix_multiply
from addmul.extras.reference import naive_outer, naive_matmul


# ------------------------------------------------------------------ #
#  outer product                                                     #
# ------------------------------------------------------------------ #
def test_outer_product_same_length():
    result = outer_product([4, 5, 6], [1, 2, 3])
    assert result.shape == (3, 3)
    np.testing.assert_array_equal(
        result,
        np.array([[4, 5, 6], [8, 10, 12], [12, 15, 18]], dtype=object))


def test_outer_product_demo_row():
    col = [0, 1, 2, 3, 4, 5]
    row = [3, 1, 4, 1, 5, 9]
    np.testing.assert_array_equal(outer_product(row, col), naive_outer(row, col))


def test_repeated_scalar_computed_once():
    row = [3, -1, 0, 4]
    m, stats = outer_product(row, [2, 7, 2], return_stats=True)
    assert stats["scale_calls"] == 2
    assert stats["cache_hits"] == 1
    np.testing.assert_array_equal(m[0], m[2])
    assert list(m[0]) == [6, -2, 0, 8]


def test_paired_rows():
    rows = [[1, 2], [3, 4], [1, 2]]
    col = [5, 6, 5]
    m, stats = outer_product(rows, col, return_stats=True)
    np.testing.assert_array_equal(m, naive_outer(rows, col))
    assert stats["n_distinct_rows"] == 2
    assert stats["scale_calls"] == 2 and stats["cache_hits"] == 1


def test_different_rows_never_share_cache():
    m, stats = outer_product([[1, 2], [3, 4]], [5, 5], return_stats=True)
    assert stats["scale_calls"] == 2 and stats["cache_hits"] == 0
    assert m.tolist() == [[5, 10], [15, 20]]


def test_outer_empty_column():
    m = outer_product([1, 2, 3], [])
    assert m.shape == (0, 3)


def test_outer_bad_shapes():
    with pytest.raises(ValueError):
        outer_product([[1, 2], [3, 4]], [1, 2, 3])
    with pytest.raises(ValueError):
        outer_product(np.zeros((2, 2, 2), dtype=int), [1, 2])


def test_outer_ragged_rows():
    with pytest.raises(ValueError, match="different lengths"):
        outer_product([[1, 2], [3]], [1, 2])


def test_outer_parallel_matches_serial():
    rng = np.random.default_rng(3)
    rows = rng.integers(-9, 10, size=(6, 5))
    col = rng.integers(-9, 10, size=6)
    serial = outer_product(rows, col)
    par = outer_product(rows, col, n_jobs=2)
    np.testing.assert_array_equal(serial, par)
    np.testing.assert_array_equal(par, naive_outer(rows, col))


# ------------------------------------------------------------------ #
#  scalar cache                                                      #
# ------------------------------------------------------------------ #
def test_cache_threads_compute_once():
    cache = ScalarCache()
    calls = []
    lock = threading.Lock()

    def compute():
        with lock:
            calls.append(1)
        time.sleep(0.05)
        return "value"

    with ThreadPoolExecutor(max_workers=8) as ex:
        out = list(ex.map(lambda _: cache.get_or_compute(3, compute), range(16)))

    assert out == ["value"] * 16
    assert len(calls) == 1
    assert cache.stats() == dict(entries=1, hits=15, misses=1)
    assert 3 in cache and len(cache) == 1


# ------------------------------------------------------------------ #
#  matrix product                                                    #
# ------------------------------------------------------------------ #
def test_matrix_mult_normal():
    a = [[1, 2, 3],
         [4, 5, 6]]
    b = [[7, 8],
         [9, 10],
         [11, 12]]
    expected = [[1*7 + 2*9 + 3*11,  1*8 + 2*10 + 3*12],
                [4*7 + 5*9 + 6*11,  4*8 + 5*10 + 6*12]]
    assert matrix_multiply(a, b).tolist() == expected


def test_matrix_mult_random_and_parallel():
    rng = np.random.default_rng(7)
    a = rng.integers(-20, 21, size=(4, 3))
    b = rng.integers(-20, 21, size=(3, 5))
    np.testing.assert_array_equal(matrix_multiply(a, b), naive_matmul(a, b))
    np.testing.assert_array_equal(matrix_multiply(a, b, n_jobs=2),
                                  naive_matmul(a, b))


def test_matrix_mult_bad_dims():
    with pytest.raises(ValueError):
        matrix_multiply([[1, 2]], [[1, 2]])
    with pytest.raises(ValueError):
        matrix_multiply([1, 2], [[1], [2]])
