"""
reference.py  – plain multiplying versions of the addmul entry points.

WARNING
-------
• For benchmarking and unit–testing *only*.
• Do NOT import this module inside the addition-only pipeline.

Functions
---------
naive_scale(c, v)
    c · v, one multiplication per entry.

naive_outer(rows, column)
    Same pairing rules as addmul.outer.outer_product.

naive_matmul(a, b)
    Exact object-dtype a @ b.

count_multiplications(rows, column)
    Genuine multiplications done by outer_product vs. the naive loop.
"""

from __future__ import annotations
import numpy as np


# ---------- 1. scaling ------------------------------------------------
def naive_scale(c: int, v) -> np.ndarray:
    return np.array([int(c) * int(x) for x in v], dtype=object)


# ---------- 2. outer product ------------------------------------------
def naive_outer(rows, column) -> np.ndarray:
    R = np.asarray(rows, dtype=object)
    col = [int(c) for c in column]
    if R.ndim == 1:
        return np.array([naive_scale(c, R) for c in col],
                        dtype=object).reshape(len(col), len(R))
    if R.shape[0] != len(col):
        raise ValueError("rows and column lengths differ")
    return np.array([naive_scale(c, r) for c, r in zip(col, R)],
                    dtype=object).reshape(R.shape)


# ---------- 3. matrix product -----------------------------------------
def naive_matmul(a, b) -> np.ndarray:
    A = np.asarray(a, dtype=object)
    B = np.asarray(b, dtype=object)
    return A @ B                # dtype=object → exact


# ---------- 4. multiplication count -----------------------------------
def count_multiplications(rows, column) -> dict:
    """
    Every distinct (row, non-zero-row, scalar) pair costs one multiplication
    in outer_product; the naive loop pays one per matrix entry.
    """
    R = np.asarray(rows, dtype=object)
    col = [int(c) for c in column]
    if R.ndim == 1:
        pairs = {(tuple(int(x) for x in R), c) for c in col}
        n_entries = len(col) * len(R)
    else:
        pairs = {(tuple(int(x) for x in r), c) for r, c in zip(R, col)}
        n_entries = R.size
    addition_only = sum(1 for r, _ in pairs if any(r))
    return dict(naive=n_entries, addition_only=addition_only)
