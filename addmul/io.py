from pathlib import Path
import ast, re, warnings
import numpy as np
import yaml

__all__ = ["load_matrix", "save_yaml"]

_INT_RE = re.compile(r"-?\d+")


def _tokenise(line: str):
    """Return all integers in *line* (list may be empty)."""
    return [int(x) for x in _INT_RE.findall(line)]


def _validate_rows(rows):
    if len({len(r) for r in rows}) > 1:
        raise ValueError("Matrix rows have different lengths.")


def load_matrix(path, *, fmt: str = "auto") -> np.ndarray:
    """
    Load an integer matrix (dtype=object).

    fmt = "auto"     : try the row format first; if it fails,
                       fall back to Python literal **and emit a warning**.
    fmt = "rows"     : one matrix row per line, integers separated by
                       blanks or commas.
    fmt = "literal"  : a Python list of lists.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(path)
    text = path.read_text()

    def parse_rows():
        if "[" in text:
            raise ValueError("row parser does not accept brackets")
        rows = [_tokenise(ln) for ln in text.splitlines()]
        rows = [r for r in rows if r]              # drop lines w/o digits
        if not rows:
            raise ValueError("row parser found no integers")
        _validate_rows(rows)
        return np.array(rows, dtype=object)

    def parse_literal():
        try:
            data = ast.literal_eval(text)
        except Exception as exc:
            raise ValueError("literal parser failed") from exc
        try:
            rows = [[int(x) for x in r] for r in data]
        except TypeError as exc:
            raise ValueError("literal is not a list of rows") from exc
        _validate_rows(rows)
        return np.array(rows, dtype=object)

    if fmt == "rows":
        return parse_rows()
    if fmt == "literal":
        return parse_literal()
    if fmt == "auto":
        try:
            return parse_rows()
        except ValueError:
            warnings.warn(
                "load_matrix: falling back to Python-literal parser "
                "because row parser failed.",
                RuntimeWarning,
                stacklevel=2,
            )
            return parse_literal()

    raise ValueError("fmt must be 'auto', 'rows', or 'literal'")


def _plain(obj):
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, np.ndarray)):
        return [_plain(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    return obj


def save_yaml(obj, path):
    Path(path).write_text(yaml.dump(_plain(obj), sort_keys=False))
