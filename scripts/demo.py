#!/usr/bin/env python3
# ======================================================================
#  demo.py      addition-only outer product & matrix product
#  – outer product of a column with a row, one multiplication per scalar
#  – 2×3 · 3×2 matrix product as a sum of outer products
#  – optional: --row / --col override, --a / --b matrix files,
#    --stats-out dumps YAML stats
# ======================================================================

from __future__ import annotations
import argparse, sys

from addmul import (
    load_matrix, matrix_multiply, outer_product, reduce_vector, save_yaml,
)


def _ints(text: str):
    return [int(x) for x in text.replace(",", " ").split()]


def main(argv):
    ap = argparse.ArgumentParser()
    ap.add_argument("--row", default="3 1 4 1 5 9")
    ap.add_argument("--col", default="0 1 2 3 4 5")
    ap.add_argument("--a", help="left matrix file (rows or literal format)")
    ap.add_argument("--b", help="right matrix file (rows or literal format)")
    ap.add_argument("--stats-out")
    args = ap.parse_args(argv)

    row, col = _ints(args.row), _ints(args.col)
    product, stats = outer_product(row, col, return_stats=True)
    print(f"outer_product(col, row) = {product.tolist()}")

    a = load_matrix(args.a) if args.a else [[1, 2, 3],
                                            [4, 5, 6]]
    b = load_matrix(args.b) if args.b else [[7, 8],
                                            [9, 10],
                                            [11, 12]]
    print(f"matrix_multiply(a, b) = {matrix_multiply(a, b).tolist()}")

    stats.update(reduction=reduce_vector(row).stats())
    print(f"scale calls = {stats['scale_calls']} | cache hits = "
          f"{stats['cache_hits']} | depth = {stats['reduction']['depth']}")
    if args.stats_out:
        save_yaml(stats, args.stats_out)


# ────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    main(sys.argv[1:])
