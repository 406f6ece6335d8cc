"""
addmul.maths
============

Integer helpers for the addition-only scaling core.

• prepare        – split a row into zero positions, negative positions and
                   the non-negative magnitudes ("naturals").
• align          – positive int  →  (odd core, shift),  core << shift == v.
• take_diffs     – first value as-is, then successive differences.
• accumulate     – inclusive prefix sum (inverse of take_diffs).
• reinsert       – put zeros and signs back after scaling.
• check_width    – optional signed fixed-width range check.

Everything stays on exact Python ints; arrays use dtype=object.
"""
from __future__ import annotations
from typing import Iterable, NamedTuple, Tuple

import numpy as np

__all__ = [
    "ArithmeticOverflowError", "PreparedVector", "AlignedValue",
    "as_int", "as_int_vector", "prepare", "trailing_zeros", "align",
    "align_all", "take_diffs", "accumulate", "reinsert", "check_width",
]


class ArithmeticOverflowError(OverflowError):
    """A value left the configured signed word range."""


class PreparedVector(NamedTuple):
    zeros: np.ndarray       # positions of 0 entries (ascending)
    negatives: np.ndarray   # positions of < 0 entries (ascending)
    naturals: np.ndarray    # |v| for every non-zero entry, original order


class AlignedValue(NamedTuple):
    core: int
    shift: int

    @property
    def value(self) -> int:
        return self.core << self.shift


# ---------------------------------------------------------------------- #
#  input normalisation                                                   #
# ---------------------------------------------------------------------- #
def as_int(x) -> int:
    if isinstance(x, (int, np.integer)):
        return int(x)
    if isinstance(x, (float, np.floating)) and float(x).is_integer():
        return int(x)
    raise ValueError(f"expected an integer entry, got {x!r}")


def as_int_vector(v: Iterable) -> np.ndarray:
    """Return *v* as a 1-D dtype=object array of Python ints."""
    arr = np.asarray(v if isinstance(v, np.ndarray) else list(v), dtype=object)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D vector, got shape {arr.shape}")
    return np.array([as_int(x) for x in arr], dtype=object)


# ---------------------------------------------------------------------- #
#  Preparer                                                              #
# ---------------------------------------------------------------------- #
def prepare(row: Iterable) -> PreparedVector:
    """
    Drop the zeros of *row* and make the rest non-negative.

    Zero never reaches the descent: a 0 next to non-zero values gives a
    difference sequence that never shrinks to one element.
    """
    v = as_int_vector(row)
    pos = np.arange(len(v))
    is_zero = np.array([x == 0 for x in v], dtype=bool)
    is_neg = np.array([x < 0 for x in v], dtype=bool)
    naturals = np.array([abs(x) for x in v[~is_zero]], dtype=object)
    return PreparedVector(pos[is_zero], pos[is_neg], naturals)


# ---------------------------------------------------------------------- #
#  Aligner                                                               #
# ---------------------------------------------------------------------- #
def trailing_zeros(v: int) -> int:
    return (v & -v).bit_length() - 1


def align(v: int) -> AlignedValue:
    """Shift the trailing zero bits off a strictly positive int."""
    v = as_int(v)
    if v <= 0:
        raise ValueError(f"align() needs a positive integer, got {v}")
    shift = trailing_zeros(v)
    return AlignedValue(v >> shift, shift)


def align_all(values: Iterable[int]) -> Tuple[np.ndarray, np.ndarray]:
    """Vector form of `align`: returns (cores, shifts) as two arrays."""
    pairs = [align(v) for v in values]
    cores = np.array([p.core for p in pairs], dtype=object)
    shifts = np.array([p.shift for p in pairs], dtype=np.int64)
    return cores, shifts


# ---------------------------------------------------------------------- #
#  differences / prefix sums                                             #
# ---------------------------------------------------------------------- #
def take_diffs(values: np.ndarray) -> np.ndarray:
    """[a, b, c, …] → [a, b-a, c-b, …]"""
    values = np.asarray(values, dtype=object)
    if len(values) < 2:
        return values.copy()
    return np.concatenate([values[:1], np.diff(values)]).astype(object)


def accumulate(values: np.ndarray) -> np.ndarray:
    """Inclusive running total; undoes `take_diffs`."""
    values = np.asarray(values, dtype=object)
    if len(values) == 0:
        return values.copy()
    return np.cumsum(values).astype(object)


# ---------------------------------------------------------------------- #
#  zeros & signs                                                         #
# ---------------------------------------------------------------------- #
def reinsert(scaled: np.ndarray, prepared: PreparedVector,
             length: int) -> np.ndarray:
    """
    Single linear pass: scaled naturals go to the non-zero slots in order,
    zero slots get 0, negative slots are negated.
    """
    out = np.zeros(length, dtype=object)
    mask = np.ones(length, dtype=bool)
    mask[prepared.zeros] = False
    out[mask] = scaled
    out[prepared.negatives] = -out[prepared.negatives]
    return out


# ---------------------------------------------------------------------- #
#  fixed-width check                                                     #
# ---------------------------------------------------------------------- #
def check_width(values, word_bits: int | None, what: str = "value", *,
                magnitude: bool = False):
    """
    Raise ArithmeticOverflowError if any of *values* does not fit a signed
    `word_bits`-bit integer.  `word_bits=None` means unbounded.

    magnitude=True checks |x| against 2**(word_bits-1) instead: the value
    may still be negated afterwards, and -2**(word_bits-1) is legal.
    """
    if word_bits is None:
        return
    lo, hi = -(1 << (word_bits - 1)), (1 << (word_bits - 1)) - 1
    if magnitude:
        lo, hi = -(hi + 1), hi + 1
    for x in np.atleast_1d(np.asarray(values, dtype=object)):
        if not lo <= x <= hi:
            raise ArithmeticOverflowError(
                f"{what} {x} does not fit in {word_bits} signed bits")
