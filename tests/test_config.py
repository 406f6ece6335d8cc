"""
Unit tests for addmul.config
"""

from pathlib import Path
import pytest
from addmul import config


def test_defaults():
    assert config.DEFAULTS["WORD_BITS"] is None
    assert config.DEFAULTS["MAX_DEPTH"] > 0


def test_env_override():
    cfg = config._from_env({"ADDMUL_MAX_DEPTH": "12",
                            "ADDMUL_WORD_BITS": "32",
                            "ADDMUL_N_JOBS": "3"})
    assert cfg == dict(MAX_DEPTH=12, WORD_BITS=32, N_JOBS=3)
    assert config._from_env({"ADDMUL_WORD_BITS": "none"})["WORD_BITS"] is None


def test_load_config(tmp_path: Path):
    p = tmp_path / "cfg.yml"
    p.write_text("max_depth: 50\nword_bits: 64\n")
    cfg = config.load_config(p)
    assert cfg["MAX_DEPTH"] == 50 and cfg["WORD_BITS"] == 64
    assert cfg["N_JOBS"] == config.DEFAULTS["N_JOBS"]


def test_load_config_errors(tmp_path: Path):
    p = tmp_path / "bad.yml"
    p.write_text("colour: red\n")
    with pytest.raises(ValueError):
        config.load_config(p)
    p.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        config.load_config(p)
    p.write_text("word_bits: 1\n")
    with pytest.raises(ValueError):
        config.load_config(p)
    p.write_text("n_jobs: 0\n")
    with pytest.raises(ValueError):
        config.load_config(p)
    with pytest.raises(ValueError):
        config._from_env({"ADDMUL_N_JOBS": "0"})
    assert config._from_env({"ADDMUL_N_JOBS": "-1"})["N_JOBS"] == -1


def test_config_drives_depth_cap(monkeypatch):
    from addmul.reduce import DescentDepthError, scalar_multiply
    monkeypatch.setitem(config.CONFIG, "MAX_DEPTH", 1)
    with pytest.raises(DescentDepthError):
        scalar_multiply(2, [1, 3])
