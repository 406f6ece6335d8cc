"""
addmul.reduce
=============

Scale an integer vector by a scalar with exactly one real multiplication.

Algorithm
---------
Descent (per level, until one value is left)
    1. align every value  →  (odd core, shift)
    2. sort by core and remember where every entry came from
    3. keep the distinct cores, take first differences
    4. recurse on the differences
Base case
    multiply the single remaining value by the scalar.
Ascent (per level, deepest first)
    1. prefix-sum the incoming vector  →  scaled distinct cores
    2. scatter them back to their positions, shifting each by its
       recorded shift.

With positive entries the largest value drops strictly from one level to
the next, so the descent ends; `max_depth` still caps it.

Public API
----------
down(cores, shifts, *, max_depth)      → (base value, levels)
up(levels, carry, *, word_bits)        → scaled naturals
reduce_vector(row, *, max_depth)       → Reduction
scalar_multiply(c, row, **kw)          → ndarray (dtype=object)
"""
from __future__ import annotations
from typing import Dict, List, NamedTuple, Sequence, Tuple

import numpy as np

from .config import CONFIG
from .maths import (
    PreparedVector, accumulate, align_all, as_int, check_width, prepare,
    reinsert, take_diffs,
)

__all__ = ["DescentDepthError", "Level", "Reduction", "down", "up",
           "reduce_vector", "scalar_multiply"]


class DescentDepthError(RuntimeError):
    """The descent did not reach a single value within `max_depth` levels."""


class Level(NamedTuple):
    """
    One descent level, stored flat.  Entry j (in sorted order) sat at
    position order[j], lost shifts[j] trailing zero bits, and its core is the
    rank[j]-th distinct core of the level.
    """
    length: int
    order: np.ndarray
    shifts: np.ndarray
    rank: np.ndarray

    @property
    def n_distinct(self) -> int:
        return int(self.rank[-1]) + 1 if self.length else 0

    def positions(self) -> np.ndarray:
        return self.order.copy()

    def pointer_map(self, cores: Sequence[int]) -> Dict[int, List[Tuple[int, int]]]:
        """
        value → [(position, shift), …] view of the level, given the distinct
        sorted cores of this level (as returned by `down(..., keep_cores=True)`).
        """
        out: Dict[int, List[Tuple[int, int]]] = {}
        for p, s, k in zip(self.order, self.shifts, self.rank):
            out.setdefault(cores[k], []).append((int(p), int(s)))
        return out


# ---------------------------------------------------------------------- #
#  Descent                                                               #
# ---------------------------------------------------------------------- #
def _build_level(cores: np.ndarray, shifts: np.ndarray):
    order = np.argsort(cores, kind="stable")
    sorted_cores = cores[order]
    new = np.ones(len(sorted_cores), dtype=bool)
    new[1:] = sorted_cores[1:] != sorted_cores[:-1]
    rank = np.cumsum(new) - 1
    level = Level(len(cores), order, shifts[order], rank)
    return level, sorted_cores[new]


def down(cores: np.ndarray, shifts: np.ndarray, *,
         max_depth: int | None = None, keep_cores: bool = False):
    """
    Reduce an aligned vector to a single value.

    Parameters
    ----------
    cores, shifts : aligned entries (every core odd and positive)
    max_depth     : level cap, defaults to CONFIG["MAX_DEPTH"]
    keep_cores    : also return the distinct sorted cores of every level

    Returns
    -------
    base   : int, the value left after the last level (core << shift)
    levels : list[Level], root level first
    (cores_per_level : list[ndarray] if keep_cores)
    """
    if max_depth is None:
        max_depth = CONFIG["MAX_DEPTH"]
    cores = np.asarray(cores, dtype=object)
    shifts = np.asarray(shifts, dtype=np.int64)
    if len(cores) == 0:
        raise ValueError("down() needs at least one value")

    levels: List[Level] = []
    distinct_per_level: List[np.ndarray] = []
    while len(cores) > 1:
        if len(levels) >= max_depth:
            raise DescentDepthError(
                f"descent exceeded {max_depth} levels with "
                f"{len(cores)} values still left")
        level, distinct = _build_level(cores, shifts)
        levels.append(level)
        distinct_per_level.append(distinct)
        cores, shifts = align_all(take_diffs(distinct))

    base = int(cores[0]) << int(shifts[0])
    if keep_cores:
        return base, levels, distinct_per_level
    return base, levels


# ---------------------------------------------------------------------- #
#  Ascent                                                                #
# ---------------------------------------------------------------------- #
def up(levels: Sequence[Level], carry, *,
       word_bits: int | None = None) -> np.ndarray:
    """
    Rebuild the scaled vector.  *levels* must be ordered deepest first
    (the reverse of what `down` returns); *carry* is the scaled base value
    or the vector produced by the deeper level.
    """
    vec = np.atleast_1d(np.asarray(carry, dtype=object))
    for level in levels:
        sums = accumulate(vec)
        check_width(sums, word_bits, "prefix sum", magnitude=True)
        out = np.empty(level.length, dtype=object)
        out[level.order] = np.array(
            [int(sums[k]) << int(s) for k, s in zip(level.rank, level.shifts)],
            dtype=object)
        check_width(out, word_bits, "shifted value", magnitude=True)
        vec = out
    return vec


# ---------------------------------------------------------------------- #
#  reduce once, scale many                                               #
# ---------------------------------------------------------------------- #
class Reduction:
    """
    Descent results for one row.  `scale(c)` replays only the ascent, so a
    row can be scaled by many scalars after a single descent.
    """

    def __init__(self, length: int, prepared: PreparedVector,
                 base: int | None, levels: Sequence[Level]):
        self.length = length
        self.prepared = prepared
        self.base = base
        self.levels = tuple(levels)
        self._ascent = tuple(reversed(self.levels))

    @property
    def depth(self) -> int:
        return len(self.levels)

    def scale(self, c: int, *, word_bits: int | None = None) -> np.ndarray:
        if word_bits is None:
            word_bits = CONFIG["WORD_BITS"]
        c = as_int(c)
        if self.base is None:                     # nothing but zeros
            return np.zeros(self.length, dtype=object)
        carry = self.base * c                     # the only multiplication
        check_width(carry, word_bits, "scaled base value", magnitude=True)
        naturals = up(self._ascent, carry, word_bits=word_bits)
        out = reinsert(naturals, self.prepared, self.length)
        check_width(out, word_bits, "scaled entry")
        return out

    def stats(self) -> dict:
        return dict(
            length=self.length,
            zeros=len(self.prepared.zeros),
            negatives=len(self.prepared.negatives),
            depth=self.depth,
            level_lengths=[lv.length for lv in self.levels],
            base=self.base,
        )

    def __repr__(self):
        return (f"Reduction(length={self.length}, depth={self.depth}, "
                f"base={self.base})")


def reduce_vector(row, *, max_depth: int | None = None) -> Reduction:
    """Prepare, align and descend *row* once."""
    prepared = prepare(row)
    length = len(prepared.naturals) + len(prepared.zeros)
    if len(prepared.naturals) == 0:
        return Reduction(length, prepared, None, [])
    cores, shifts = align_all(prepared.naturals)
    base, levels = down(cores, shifts, max_depth=max_depth)
    return Reduction(length, prepared, base, levels)


def scalar_multiply(c: int, row, *, max_depth: int | None = None,
                    word_bits: int | None = None) -> np.ndarray:
    """c · row, with one genuine multiplication.  Length is preserved."""
    return reduce_vector(row, max_depth=max_depth).scale(c, word_bits=word_bits)
