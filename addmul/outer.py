"""
addmul.outer
============

Outer products and matrix products built on `Reduction.scale`.

A row is reduced once; every column scalar then costs one multiplication
plus one ascent, and a repeated scalar costs nothing thanks to a per-row
`ScalarCache`.

Public functions
----------------
outer_product(rows, column, *, n_jobs=None, progress=False, return_stats=False)
    rows : one 1-D row  → result[i] = column[i] · row        (m × n)
           m rows       → result[i] = column[i] · rows[i]    (m × n)

matrix_multiply(a, b, *, n_jobs=None, progress=False)
    (m × k) · (k × n) as the sum of k outer products.
"""
from __future__ import annotations
import threading
from typing import Callable, Dict, Hashable, List, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed
from tqdm.auto import tqdm

from .config import CONFIG
from .maths import as_int_vector
from .reduce import reduce_vector

__all__ = ["ScalarCache", "outer_product", "matrix_multiply"]


# ---------------------------------------------------------------------- #
#  per-row cache                                                         #
# ---------------------------------------------------------------------- #
class ScalarCache:
    """
    scalar → scaled row, for ONE row.  `get_or_compute` runs *compute* at
    most once per key even when called from several threads.
    """

    def __init__(self):
        self._values: Dict[Hashable, object] = {}
        self._pending: Dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self):
        return len(self._values)

    def __contains__(self, key):
        return key in self._values

    def get_or_compute(self, key: Hashable, compute: Callable[[], object]):
        with self._guard:
            if key in self._values:
                self.hits += 1
                return self._values[key]
            lock = self._pending.setdefault(key, threading.Lock())

        with lock:
            with self._guard:
                if key in self._values:         # another thread finished it
                    self.hits += 1
                    return self._values[key]
            value = compute()
            with self._guard:
                self._values[key] = value
                self.misses += 1
                self._pending.pop(key, None)
            return value

    def stats(self) -> dict:
        return dict(entries=len(self._values), hits=self.hits,
                    misses=self.misses)


# ---------------------------------------------------------------------- #
#  helpers                                                               #
# ---------------------------------------------------------------------- #
def _scale_group(row: np.ndarray, scalars: Sequence[int],
                 max_depth, word_bits) -> Tuple[List[np.ndarray], dict]:
    """Scale one row by every scalar; the cache lives only in this call."""
    reduction = reduce_vector(row, max_depth=max_depth)
    cache = ScalarCache()
    out = [cache.get_or_compute(
               c, lambda c=c: reduction.scale(c, word_bits=word_bits))
           for c in scalars]
    return out, cache.stats()


def _group_rows(rows, column: np.ndarray):
    """Return (n_cols, [(row, [column positions]), …])."""
    arr = np.asarray(rows, dtype=object)
    if arr.ndim == 1 and any(np.ndim(r) > 0 for r in arr):
        raise ValueError("rows have different lengths")
    if arr.ndim == 1:
        row = as_int_vector(arr)
        return len(row), [(row, list(range(len(column))))]
    if arr.ndim != 2:
        raise ValueError(f"rows must be 1-D or 2-D, got shape {arr.shape}")
    if arr.shape[0] != len(column):
        raise ValueError(
            f"{arr.shape[0]} rows cannot be paired with a column of "
            f"length {len(column)}")
    groups: Dict[Tuple[int, ...], Tuple[np.ndarray, List[int]]] = {}
    for i, r in enumerate(arr):
        row = as_int_vector(r)
        key = tuple(row)
        groups.setdefault(key, (row, []))[1].append(i)
    return arr.shape[1], list(groups.values())


# ---------------------------------------------------------------------- #
#  outer product                                                         #
# ---------------------------------------------------------------------- #
def outer_product(rows, column, *, n_jobs: int | None = None,
                  progress: bool = False, return_stats: bool = False,
                  max_depth: int | None = None, word_bits: int | None = None):
    """
    Scale row(s) by the entries of *column*.

    Identical rows are reduced once and share one ScalarCache; different
    rows never share cached results.  With n_jobs > 1 the distinct rows are
    spread over joblib workers, each owning the caches of its rows.

    Returns
    -------
    matrix : (m × n) ndarray, dtype=object
    stats  : dict (only if return_stats) – n_rows, n_distinct_rows,
             scale_calls, cache_hits
    """
    if n_jobs is None:
        n_jobs = CONFIG["N_JOBS"]
    column = as_int_vector(column)
    n_cols, groups = _group_rows(rows, column)

    jobs = [(row, [column[i] for i in idx]) for row, idx in groups]
    if n_jobs != 1 and len(jobs) > 1:
        res = Parallel(n_jobs=n_jobs, backend="loky")(
            delayed(_scale_group)(row, scalars, max_depth, word_bits)
            for row, scalars in jobs)
    else:
        res = [_scale_group(row, scalars, max_depth, word_bits)
               for row, scalars in tqdm(jobs, desc="rows", unit="row",
                                        disable=not progress)]

    matrix = np.empty((len(column), n_cols), dtype=object)
    misses = hits = 0
    for (_, idx), (scaled, cstats) in zip(groups, res):
        for i, vec in zip(idx, scaled):
            matrix[i, :] = vec
        misses += cstats["misses"]
        hits += cstats["hits"]

    if not return_stats:
        return matrix
    stats = dict(
        n_rows=len(column),
        n_distinct_rows=len(groups),
        scale_calls=misses,
        cache_hits=hits,
    )
    return matrix, stats


# ---------------------------------------------------------------------- #
#  matrix product                                                        #
# ---------------------------------------------------------------------- #
def matrix_multiply(a, b, *, n_jobs: int | None = None,
                    progress: bool = False, max_depth: int | None = None,
                    word_bits: int | None = None) -> np.ndarray:
    """
    a · b  =  Σ_k  outer(a[:, k], b[k, :]).

    Only the outer products' base values are multiplied; transposition and
    the final sums are plain array operations.
    """
    if n_jobs is None:
        n_jobs = CONFIG["N_JOBS"]
    A = np.asarray(a, dtype=object)
    B = np.asarray(b, dtype=object)
    if A.ndim != 2 or B.ndim != 2:
        raise ValueError("matrix_multiply expects two 2-D matrices")
    if A.shape[1] != B.shape[0]:
        raise ValueError(
            f"inner dimensions differ: {A.shape} · {B.shape}")

    A_t = A.T
    kw = dict(n_jobs=1, max_depth=max_depth, word_bits=word_bits)
    if n_jobs != 1 and A.shape[1] > 1:
        parts = Parallel(n_jobs=n_jobs, backend="loky")(
            delayed(outer_product)(B[k], A_t[k], **kw)
            for k in range(A.shape[1]))
    else:
        parts = [outer_product(B[k], A_t[k], **kw)
                 for k in tqdm(range(A.shape[1]), desc="outer products",
                               unit="k", disable=not progress)]

    result = np.zeros((A.shape[0], B.shape[1]), dtype=object)
    for p in parts:
        result += p
    return result
