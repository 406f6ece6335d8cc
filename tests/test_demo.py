"""
Driver script: matrices read from files feed matrix_multiply
"""

import importlib.util
from pathlib import Path

import pytest
import yaml

repo_root = Path(__file__).resolve().parents[1]


def _load_demo():
    spec = importlib.util.spec_from_file_location(
        "demo", repo_root / "scripts" / "demo.py")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_demo_defaults(capsys):
    _load_demo().main([])
    out = capsys.readouterr().out
    assert "matrix_multiply(a, b) = [[58, 64], [139, 154]]" in out
    assert "[15, 5, 20, 5, 25, 45]" in out


def test_demo_matrix_files(tmp_path: Path, capsys):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("1 0\n-2 3\n")
    b.write_text("[[4, 5], [6, -7]]")
    stats = tmp_path / "stats.yml"
    with pytest.warns(RuntimeWarning):          # b is a Python literal
        _load_demo().main(["--a", str(a), "--b", str(b),
                           "--stats-out", str(stats)])
    out = capsys.readouterr().out
    assert "matrix_multiply(a, b) = [[4, 5], [10, -31]]" in out
    data = yaml.safe_load(stats.read_text())
    assert data["scale_calls"] == 6 and data["reduction"]["length"] == 6
